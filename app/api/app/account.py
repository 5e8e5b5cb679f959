"""앱 계정 라우터 — 내 프로필, 비밀번호, 탈퇴, 개인 데이터 내보내기.

App Account Router — Member self-service. Deletion and data export need
the current password again.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.user import (
    PasswordChangeRequest,
    PasswordConfirmRequest,
    ProfileUpdateRequest,
    UserResponse,
)
from app.services.user_service import user_service

router: APIRouter = APIRouter()


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    """내 이름/이메일을 수정합니다."""
    result: UserResponse = await user_service.update_profile(db, current_user.id, data.name, data.email)
    await db.commit()
    return result


@router.put("/password", response_model=MessageResponse)
async def change_password(
    data: PasswordChangeRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict[str, str]:
    """비밀번호를 변경합니다.

    Change the password after checking the current one.
    """
    await user_service.change_password(db, current_user.email, data.current_password, data.new_password)
    await db.commit()
    return {"message": "Password changed successfully"}


@router.post("/delete", response_model=MessageResponse)
async def delete_account(
    data: PasswordConfirmRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict[str, str]:
    """비밀번호 확인 후 내 계정을 삭제합니다 (소프트 삭제)."""
    await user_service.delete_account(db, current_user.email, data.password)
    await db.commit()
    return {"message": "Account deleted successfully"}


@router.post("/export")
async def export_account_data(
    data: PasswordConfirmRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict[str, Any]:
    """비밀번호 확인 후 내 개인 데이터를 JSON으로 내보냅니다.

    Export the member's personal data (right of access and portability).
    """
    result: dict[str, Any] = await user_service.export_user_data(db, current_user.email, data.password)
    await db.commit()
    return result
