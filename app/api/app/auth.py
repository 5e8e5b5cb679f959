"""앱 인증 라우터 — 회원가입, 로그인, 토큰 갱신, 로그아웃, 비밀번호 설정.

App Auth Router — Member registration, login, token refresh, logout and
password setup from the welcome link.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RegisterRequest,
    SetupPasswordRequest,
    TokenResponse,
    UserMeResponse,
)
from app.schemas.common import MessageResponse
from app.services.auth_service import auth_service
from app.services.user_service import user_service
from app.utils.request import get_client_ip

router: APIRouter = APIRouter()


@router.post("/register", response_model=UserMeResponse, status_code=201)
async def register(
    data: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserMeResponse:
    """회원가입 — reCAPTCHA가 켜져 있으면 토큰이 필요합니다.

    Member registration. Requires a reCAPTCHA token when enabled.
    """
    result: UserMeResponse = await auth_service.register(db, data)
    await db.commit()
    return result


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LoginResponse:
    """로그인 — 5회 연속 실패 시 15분간 잠금.

    Login endpoint. Five consecutive failures lock the email for 15 minutes.
    """
    result: LoginResponse = await auth_service.login(db, data, get_client_ip(request))
    await db.commit()
    return result


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """토큰 갱신 — 리프레시 토큰으로 새 토큰 쌍 발급.

    Refresh token endpoint. Issues a new token pair using a refresh token.
    """
    result: TokenResponse = await auth_service.refresh_tokens(db, data)
    await db.commit()
    return result


@router.post("/logout", status_code=204)
async def logout(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """로그아웃 — 리프레시 토큰 폐기."""
    await auth_service.logout(db, data.refresh_token)
    await db.commit()


@router.get("/me", response_model=UserMeResponse)
async def get_me(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserMeResponse:
    """현재 회원 프로필 조회.

    Get the profile of the currently authenticated member.
    """
    return await auth_service.get_me(db, current_user)


@router.post("/setup-password", response_model=MessageResponse)
async def setup_password(
    data: SetupPasswordRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict[str, str]:
    """환영 메일의 링크로 최초 비밀번호를 설정합니다.

    Set the initial password with the one-time token from the welcome mail.
    """
    await user_service.setup_password_with_token(db, data.token, data.password)
    await db.commit()
    return {"message": "Password has been set successfully"}
