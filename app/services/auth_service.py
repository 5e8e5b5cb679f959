"""인증 서비스 — 로그인, 회원가입, 토큰 갱신 비즈니스 로직.

Auth Service — Business logic for login, registration and token refresh.
Credentials are checked by the user service (which owns the lockout
tracking); this service issues and rotates the JWT pair.
"""

from datetime import datetime, timedelta
from uuid import UUID

import jwt
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.base import utcnow
from app.models.token import RefreshToken
from app.models.user import User
from app.repositories.auth_repository import auth_repository
from app.repositories.user_repository import user_repository
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LoginUser,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserMeResponse,
)
from app.services.recaptcha_service import recaptcha_service
from app.services.user_service import user_service
from app.utils.exceptions import BadRequestError, UnauthorizedError
from app.utils.jwt import create_access_token, create_refresh_token, decode_token


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    Manages login, registration, token refresh and logout.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, str]:
        """JWT 토큰 페이로드를 생성합니다. (JWT payload for a member)"""
        return {"sub": str(user.id), "email": user.email}

    async def _generate_tokens(self, db: AsyncSession, user: User) -> TokenResponse:
        """액세스 토큰과 리프레시 토큰을 생성합니다.

        Generate an access/refresh token pair and persist the refresh token.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 회원 모델 (Member model instance)

        Returns:
            TokenResponse: 토큰 응답 (Token response with access and refresh tokens)
        """
        payload: dict[str, str] = self._build_jwt_payload(user)
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        # 리프레시 토큰을 DB에 저장 — Persist refresh token to database
        expires_at: datetime = utcnow() + timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
        await auth_repository.create_refresh_token(
            db, user_id=user.id, token=refresh_token, expires_at=expires_at
        )

        return TokenResponse(access_token=access_token, refresh_token=refresh_token)

    async def login(self, db: AsyncSession, data: LoginRequest, client_ip: str = "unknown") -> LoginResponse:
        """로그인을 처리합니다.

        Authenticate and issue tokens together with a member summary.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 로그인 요청 데이터 (Login request data)
            client_ip: 요청 IP, 로그용 (Client IP for the log)

        Returns:
            LoginResponse: 토큰과 회원 요약 (Tokens plus member summary)

        Raises:
            UnauthorizedError: 잘못된 인증 정보 (Invalid credentials)
            TooManyRequestsError: 계정 잠금 중 (Account locked)
        """
        if not data.email.strip() or not data.password.strip():
            raise BadRequestError("Email and password are required")

        user: User | None = await user_service.login(db, data.email, data.password)
        if user is None:
            logger.warning(f"Failed login attempt for {data.email} from {client_ip}")
            raise UnauthorizedError("Invalid email or password")

        tokens: TokenResponse = await self._generate_tokens(db, user)
        logger.info(f"User {user.id} logged in from {client_ip}")
        return LoginResponse(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            user=LoginUser(
                id=str(user.id),
                name=user.name,
                email=user.email,
                email_verified=user.email_verified,
            ),
        )

    async def register(self, db: AsyncSession, data: RegisterRequest) -> UserMeResponse:
        """회원가입을 처리합니다. reCAPTCHA가 켜져 있으면 토큰을 검증합니다.

        Register a member. When reCAPTCHA is enabled a valid token is required.

        Raises:
            BadRequestError: reCAPTCHA 실패, 필수값 누락, 약한 비밀번호
                             (Failed captcha, missing field, weak password)
            DuplicateError: 이메일 중복 (Email already in use)
        """
        if settings.RECAPTCHA_ENABLED:
            if not await recaptcha_service.verify_token(data.recaptcha_token):
                raise BadRequestError("reCAPTCHA verification failed")

        user: User = await user_service.register(db, data.name, data.email, data.password)
        return self.to_me_response(user)

    async def refresh_tokens(self, db: AsyncSession, data: RefreshRequest) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Issue a new token pair using a refresh token. The old token is revoked.

        Raises:
            UnauthorizedError: 유효하지 않거나 만료된 리프레시 토큰일 때
                               (Invalid or expired refresh token)
        """
        db_token: RefreshToken | None = await auth_repository.get_refresh_token(db, data.refresh_token)
        if db_token is None:
            raise UnauthorizedError("Invalid refresh token")

        if db_token.is_expired:
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Refresh token has expired")

        try:
            payload: dict = decode_token(data.refresh_token)
        except jwt.InvalidTokenError:
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Invalid refresh token")

        if payload.get("type") != "refresh" or payload.get("sub") is None:
            raise UnauthorizedError("Invalid refresh token payload")

        user: User | None = await user_repository.find_by_id(db, UUID(payload["sub"]))
        if user is None or user.is_deleted:
            raise UnauthorizedError("User not found or inactive")

        # 기존 리프레시 토큰 삭제 후 새 토큰 발급 — Rotate the refresh token
        await auth_repository.delete_refresh_token(db, data.refresh_token)
        return await self._generate_tokens(db, user)

    async def logout(self, db: AsyncSession, refresh_token: str) -> None:
        """로그아웃 처리 — 리프레시 토큰을 삭제합니다."""
        await auth_repository.delete_refresh_token(db, refresh_token)

    def to_me_response(self, user: User) -> UserMeResponse:
        return UserMeResponse(
            id=str(user.id),
            name=user.name,
            email=user.email,
            email_verified=user.email_verified,
            avatar_path=user.avatar_path,
            of_mg=user.of_mg,
            roles=sorted(role.name for role in user.roles),
            is_admin=user.is_admin,
        )

    async def get_me(self, db: AsyncSession, user: User) -> UserMeResponse:
        """현재 로그인한 회원 프로필을 반환합니다.

        Return the profile of the currently authenticated member.
        """
        return self.to_me_response(user)


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
