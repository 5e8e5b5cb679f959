"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package registers every model with the metadata, which
Alembic migrations and relationship resolution rely on.

Modules:
    base: 소프트 삭제 믹스인 (Soft-delete mixin with UUID key and timestamps)
    user: 회원, 역할, 회원-역할 연결 (User, Role, user_roles)
    booking: 회비 예약 (Bookings)
    email: 발송 이메일 기록 (Sent email log)
    token: 리프레시 토큰, 비밀번호 설정 토큰 (Refresh and password setup tokens)
"""

from app.models.user import ADMIN_ROLE_NAME, Role, User, user_roles
from app.models.booking import Booking
from app.models.email import Email
from app.models.token import PasswordSetupToken, RefreshToken

__all__ = [
    "ADMIN_ROLE_NAME", "Role", "User", "user_roles",
    "Booking",
    "Email",
    "PasswordSetupToken", "RefreshToken",
]
