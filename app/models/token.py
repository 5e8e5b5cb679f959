"""토큰 모델 — JWT 리프레시 토큰 및 비밀번호 설정 토큰.

Token models — JWT refresh tokens for sessions and one-time password setup
tokens for accounts created by an administrator.
"""

import uuid
from datetime import datetime, timedelta

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.base import SoftDeleteMixin, as_utc, utcnow

# 비밀번호 설정 링크 유효 기간 — Setup link lifetime
PASSWORD_SETUP_TOKEN_LIFETIME: timedelta = timedelta(hours=24)


class RefreshToken(Base):
    """리프레시 토큰 테이블.

    Refresh token table for managing long-lived authentication sessions.

    Attributes:
        id: 고유 식별자 (Primary key UUID)
        user_id: 소유 회원 ID (Owner member UUID)
        token: JWT 리프레시 토큰 문자열 (JWT refresh token string)
        expires_at: 만료 일시 (Expiration timestamp)
        created_at: 생성 일시 (Creation timestamp)
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    token: Mapped[str] = mapped_column(String(512), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    user = relationship("User", back_populates="refresh_tokens")

    @property
    def is_expired(self) -> bool:
        return as_utc(self.expires_at) < utcnow()


class PasswordSetupToken(SoftDeleteMixin, Base):
    """비밀번호 설정 토큰 테이블.

    One-time token mailed to a member whose account was created without a
    password. Valid for 24 hours and only once.

    Attributes:
        user_id: 대상 회원 (Member the token belongs to)
        token: 랜덤 토큰 문자열 (Random token, unique)
        expires_at: 만료 일시 (Expiry)
        used_at: 사용 일시, 미사용이면 NULL (When the token was consumed)
    """

    __tablename__ = "password_setup_tokens"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    user = relationship("User", lazy="selectin")

    @property
    def is_expired(self) -> bool:
        return as_utc(self.expires_at) < utcnow()

    @property
    def is_used(self) -> bool:
        return self.used_at is not None

    @property
    def is_valid(self) -> bool:
        return not self.is_used and not self.is_expired

    def mark_as_used(self) -> None:
        self.used_at = utcnow()
