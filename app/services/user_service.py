"""회원 서비스 — 회원 관리, 로그인 잠금, 계정 셀프서비스 비즈니스 로직.

User Service — Business logic for member management and self-service.
Handles admin member CRUD with change notifications, registration and
login with brute-force lockout, password setup links, password changes,
account deletion and GDPR data export.
"""

import secrets
from typing import Any
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.base import utcnow
from app.models.token import PASSWORD_SETUP_TOKEN_LIFETIME, PasswordSetupToken
from app.models.user import User
from app.repositories.auth_repository import auth_repository
from app.repositories.password_setup_token_repository import password_setup_token_repository
from app.repositories.user_repository import USER_STATUSES, user_repository
from app.schemas.common import PageResponse
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.base import BaseService
from app.services.email_service import email_service
from app.utils.exceptions import (
    BadRequestError,
    DuplicateError,
    ServiceUnavailableError,
    TooManyRequestsError,
    UnauthorizedError,
)
from app.utils.login_attempts import login_attempts
from app.utils.mail_templates import (
    PROFILE_CHANGE_SUBJECT,
    WELCOME_SUBJECT,
    render_profile_change,
    render_welcome,
)
from app.utils.password import hash_password, verify_password
from app.utils.password_validator import ValidationResult, validate_password

MAX_PAGE_SIZE: int = 100

ACCOUNT_LOCKED_MESSAGE: str = (
    "Account is temporarily locked due to too many failed login attempts. "
    "Please try again later."
)
DUPLICATE_EMAIL_MESSAGE: str = "This email address is already in use"

GDPR_NOTICE: str = (
    "This export contains all personal data stored in our system as per GDPR "
    "Article 20 (Right to Data Portability) and Article 15 (Right of Access)."
)

# 관리자 수정 시 변경 추적 대상 필드 — (속성, 알림에 표시되는 라벨)
# Fields tracked on admin updates: (attribute, label shown in the notification)
TRACKED_FIELDS: tuple[tuple[str, str], ...] = (
    ("name", "Name"),
    ("email", "E-Mail"),
    ("salutation", "Anrede"),
    ("academic_title", "Akademischer Titel"),
    ("rank", "Dienstgrad"),
    ("birthday", "Geburtsdatum"),
    ("phone", "Telefon"),
    ("street", "Straße"),
    ("city", "Stadt"),
    ("postal_code", "Postleitzahl"),
    ("country", "Land"),
)
# 비어 있지 않을 때만 적용되는 필드 — Applied only when non-blank
NON_BLANK_FIELDS: frozenset[str] = frozenset({"name", "email"})


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _display(value: Any) -> str:
    if value is None or value == "":
        return "(leer)"
    return str(value)


def _require_password_policy(password: str, prefix: str = "Password validation failed") -> None:
    result: ValidationResult = validate_password(password)
    if not result.is_valid:
        raise BadRequestError(f"{prefix}: {result.error_message}")


class UserService(BaseService[User]):
    """회원 관련 비즈니스 로직을 처리하는 서비스.

    Service handling member business logic.
    """

    def __init__(self) -> None:
        super().__init__(user_repository)

    def to_response(self, user: User) -> UserResponse:
        """회원 모델을 응답 스키마로 변환합니다.

        Convert a User model instance to a UserResponse schema.

        Args:
            user: 회원 모델, 역할이 로드된 상태 (Member with roles loaded)

        Returns:
            UserResponse: 회원 응답 (Member response)
        """
        return UserResponse(
            id=str(user.id),
            name=user.name,
            email=user.email,
            email_verified=user.email_verified,
            email_verified_at=user.email_verified_at,
            avatar_path=user.avatar_path,
            salutation=user.salutation,
            academic_title=user.academic_title,
            rank=user.rank,
            birthday=user.birthday,
            phone=user.phone,
            street=user.street,
            city=user.city,
            postal_code=user.postal_code,
            country=user.country,
            of_mg=user.of_mg,
            roles=sorted(role.name for role in user.roles),
            created_at=user.created_at,
            updated_at=user.updated_at,
            deleted_at=user.deleted_at,
        )

    # ------------------------------------------------------------------
    # 생성 훅 — Create hooks
    # ------------------------------------------------------------------

    async def validate_for_create(self, db: AsyncSession, data: dict[str, Any]) -> None:
        """이름/이메일 필수 여부와 이메일 중복을 검증합니다.

        Raises:
            BadRequestError: 이름 또는 이메일 누락 (Name or email missing)
            DuplicateError: 이미 사용 중인 이메일 (Email already in use)
        """
        if not (data.get("name") or "").strip():
            raise BadRequestError("Name is required")
        if not (data.get("email") or "").strip():
            raise BadRequestError("Email is required")
        if await user_repository.find_by_email(db, data["email"]) is not None:
            raise DuplicateError(DUPLICATE_EMAIL_MESSAGE)

    async def apply_business_rules_for_create(
        self, db: AsyncSession, data: dict[str, Any]
    ) -> dict[str, Any]:
        """이메일은 소문자로, 이름은 앞뒤 공백 제거."""
        return {**data, "name": data["name"].strip(), "email": _normalize_email(data["email"])}

    # ------------------------------------------------------------------
    # 관리자 회원 관리 — Admin member management
    # ------------------------------------------------------------------

    async def create_user(self, db: AsyncSession, data: UserCreate) -> UserResponse:
        """관리자가 새 회원을 생성합니다.

        Create a member as administrator. With a password the account is
        ready immediately; without one the member receives a 24-hour
        password setup link by email.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원 생성 데이터 (Member creation data)

        Returns:
            UserResponse: 생성된 회원 응답 (Created member response)

        Raises:
            DuplicateError: 이메일 중복 (Email already in use)
            BadRequestError: 비밀번호 정책 위반 (Password policy violation)
            ServiceUnavailableError: 설정 메일 발송 실패 (Setup mail could not be sent)
        """
        fields: dict[str, Any] = data.model_dump(exclude={"password"})
        if data.password:
            _require_password_policy(data.password)
            fields["password"] = hash_password(data.password)

        user: User = await self.create(db, fields)

        if not data.password:
            await self.send_password_setup_email(db, user)

        logger.info(f"User created by admin: {user.id}")
        return self.to_response(user)

    async def send_password_setup_email(self, db: AsyncSession, user: User) -> PasswordSetupToken:
        """비밀번호 설정 토큰을 만들고 환영 메일을 발송합니다.

        Create a one-time setup token and mail the setup link.
        """
        token: PasswordSetupToken = await password_setup_token_repository.create(
            db,
            {
                "user_id": user.id,
                "token": secrets.token_urlsafe(32),
                "expires_at": utcnow() + PASSWORD_SETUP_TOKEN_LIFETIME,
            },
        )
        setup_url: str = f"{settings.APP_BASE_URL.rstrip('/')}/setup-password?token={token.token}"
        await email_service.send_simple_email(
            db,
            settings.MAIL_NOREPLY_ADDRESS,
            user.email,
            WELCOME_SUBJECT,
            render_welcome(user.name, setup_url),
        )
        logger.info(f"Password setup email sent to user {user.id}")
        return token

    async def get_user(self, db: AsyncSession, user_id: UUID) -> UserResponse:
        user: User = await user_repository.find_by_id_or_fail(db, user_id)
        return self.to_response(user)

    async def get_users_page(
        self,
        db: AsyncSession,
        page: int = 0,
        size: int = 20,
        search: str | None = None,
        status: str = "active",
    ) -> PageResponse[UserResponse]:
        """회원 목록을 검색어와 상태로 페이지 조회합니다.

        Page through members by status and optional ranked search.

        Raises:
            BadRequestError: 잘못된 page/size/status (Invalid paging or status)
        """
        if page < 0:
            raise BadRequestError("Page must not be negative")
        if not 1 <= size <= MAX_PAGE_SIZE:
            raise BadRequestError(f"Size must be between 1 and {MAX_PAGE_SIZE}")
        if status not in USER_STATUSES:
            raise BadRequestError(
                f"Invalid status: {status}. Must be one of: {', '.join(USER_STATUSES)}"
            )

        users, total = await user_repository.search_page(db, page, size, search, status)
        return PageResponse[UserResponse].build(
            [self.to_response(u) for u in users], total, page, size
        )

    async def get_all_users(self, db: AsyncSession) -> list[UserResponse]:
        """활성 회원 전체 목록 (역할 포함)."""
        users: list[User] = await user_repository.find_active_with_roles(db)
        return [self.to_response(u) for u in users]

    async def update_user(self, db: AsyncSession, user_id: UUID, data: UserUpdate) -> UserResponse:
        """관리자가 회원 정보를 수정하고, 변경 내역을 관리자들에게 알립니다.

        Update member data as administrator. Every changed field is recorded
        as "Label: old → new" and all active administrators are notified.
        Name and email are applied only when non-blank; other fields when
        they are sent at all.

        Raises:
            NotFoundError: 회원 없음 (Member not found)
            DuplicateError: 다른 회원이 사용 중인 이메일 (Email taken)
        """
        user: User = await user_repository.find_by_id_or_fail(db, user_id)
        sent: dict[str, Any] = data.model_dump(exclude_unset=True)
        changes: list[str] = []

        for field, label in TRACKED_FIELDS:
            if field not in sent or sent[field] is None:
                continue
            new_value: Any = sent[field]
            if field in NON_BLANK_FIELDS:
                if not str(new_value).strip():
                    continue
                new_value = new_value.strip()
            if field == "email":
                new_value = _normalize_email(new_value)
                if new_value != user.email:
                    await self._ensure_email_free(db, new_value, user.id)

            old_value: Any = getattr(user, field)
            if old_value == new_value:
                continue
            setattr(user, field, new_value)
            changes.append(f"{label}: {_display(old_value)} → {_display(new_value)}")

        if sent.get("of_mg") is not None:
            user.of_mg = sent["of_mg"]

        user = await user_repository.save(db, user)
        logger.info(f"User {user.id} updated by admin ({len(changes)} tracked changes)")

        if changes:
            await self._notify_admins_of_changes(db, user, changes)
        return self.to_response(user)

    async def _notify_admins_of_changes(self, db: AsyncSession, user: User, changes: list[str]) -> None:
        """모든 활성 관리자에게 변경 알림을 보냅니다. 개별 실패는 로그만 남깁니다."""
        admins: list[User] = await user_repository.find_active_admins(db)
        if not admins:
            logger.warning(f"No admin users found to notify about profile changes for user: {user.id}")
            return

        subject: str = PROFILE_CHANGE_SUBJECT.format(name=user.name)
        content: str = render_profile_change(user.name, user.email, utcnow(), changes)
        for admin in admins:
            try:
                await email_service.send_simple_email(
                    db, settings.MAIL_NOREPLY_ADDRESS, admin.email, subject, content
                )
            except ServiceUnavailableError:
                logger.error(f"Failed to notify admin {admin.email} about changes to user {user.id}")

    async def _ensure_email_free(self, db: AsyncSession, email: str, user_id: UUID) -> None:
        existing: User | None = await user_repository.find_by_email(db, email)
        if existing is not None and existing.id != user_id:
            raise DuplicateError(DUPLICATE_EMAIL_MESSAGE)

    async def soft_delete_user(self, db: AsyncSession, user_id: UUID) -> UserResponse:
        """회원을 소프트 삭제하고 세션을 모두 만료시킵니다."""
        user: User = await self.soft_delete(db, user_id)
        await auth_repository.delete_user_refresh_tokens(db, user.id)
        return self.to_response(user)

    async def restore_user(self, db: AsyncSession, user_id: UUID) -> UserResponse:
        user: User = await self.restore(db, user_id)
        return self.to_response(user)

    async def update_avatar_path(self, db: AsyncSession, user_id: UUID, path: str | None) -> User:
        user: User = await user_repository.find_by_id_or_fail(db, user_id)
        user.avatar_path = path
        return await user_repository.save(db, user)

    # ------------------------------------------------------------------
    # 인증 — Registration and login
    # ------------------------------------------------------------------

    async def register(
        self,
        db: AsyncSession,
        name: str | None,
        email: str | None,
        password: str | None,
    ) -> User:
        """회원가입을 처리합니다.

        Register a new member with a validated password.

        Raises:
            BadRequestError: 필수값 누락 또는 비밀번호 정책 위반
                             (Missing field or weak password)
            DuplicateError: 이메일 중복 (Email already in use)
        """
        if not (name or "").strip():
            raise BadRequestError("Name is required")
        if not (email or "").strip():
            raise BadRequestError("Email is required")
        if not (password or "").strip():
            raise BadRequestError("Password is required")
        _require_password_policy(password)

        user: User = await self.create(
            db, {"name": name, "email": email, "password": hash_password(password)}
        )
        logger.info(f"User registered: {user.id}")
        return user

    async def login(self, db: AsyncSession, email: str, password: str) -> User | None:
        """이메일/비밀번호로 로그인합니다.

        Authenticate a member. Failures are counted per email; five failures
        lock the email for fifteen minutes.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 로그인 이메일 (Login email)
            password: 평문 비밀번호 (Plain text password)

        Returns:
            User | None: 인증된 회원, 실패 시 None (Authenticated member or None)

        Raises:
            TooManyRequestsError: 계정 잠금 중 (Account locked)
        """
        login_attempts.prune()
        key: str = _normalize_email(email or "")

        if login_attempts.is_locked(key):
            logger.warning(f"Login attempt for locked account: {key}")
            raise TooManyRequestsError(ACCOUNT_LOCKED_MESSAGE)

        user: User | None = await user_repository.find_by_email(db, key) if key else None
        if user is None or user.is_deleted or not verify_password(password or "", user.password):
            tracker = login_attempts.record_failure(key)
            logger.warning(f"Failed login for {key} ({tracker.failed_attempts} consecutive failures)")
            return None

        login_attempts.reset(key)
        return user

    async def _login_or_fail(self, db: AsyncSession, email: str | None, password: str | None, message: str) -> User:
        if not (email or "").strip():
            raise BadRequestError("Email must not be null or blank")
        if not (password or "").strip():
            raise BadRequestError("Password must not be null or blank")
        user: User | None = await self.login(db, email, password)
        if user is None:
            raise UnauthorizedError(message)
        return user

    # ------------------------------------------------------------------
    # 계정 셀프서비스 — Account self-service
    # ------------------------------------------------------------------

    async def update_profile(
        self,
        db: AsyncSession,
        user_id: UUID,
        name: str | None = None,
        email: str | None = None,
    ) -> UserResponse:
        """내 이름/이메일을 수정합니다. 비어 있는 값은 무시됩니다."""
        user: User = await user_repository.find_by_id_or_fail(db, user_id)

        if name is not None and name.strip():
            user.name = name.strip()
        if email is not None and email.strip():
            new_email: str = _normalize_email(email)
            if new_email != user.email:
                await self._ensure_email_free(db, new_email, user.id)
                user.email = new_email

        user = await user_repository.save(db, user)
        logger.info(f"Profile updated for user: {user.id}")
        return self.to_response(user)

    async def change_password(
        self,
        db: AsyncSession,
        email: str,
        current_password: str,
        new_password: str,
    ) -> None:
        """현재 비밀번호 확인 후 새 비밀번호로 변경합니다.

        Raises:
            BadRequestError: 현재 비밀번호 불일치, 정책 위반, 동일 비밀번호
                             (Wrong current password, weak or unchanged password)
        """
        if not (current_password or "").strip():
            raise BadRequestError("Current password must not be null or blank")
        if not (new_password or "").strip():
            raise BadRequestError("New password must not be null or blank")

        user: User | None = await self.login(db, email, current_password)
        if user is None:
            logger.warning(f"Password change attempt with invalid credentials for user: {email}")
            raise BadRequestError("Invalid current password")

        _require_password_policy(new_password, "New password validation failed")
        if verify_password(new_password, user.password):
            raise BadRequestError("New password must be different from current password")

        user.password = hash_password(new_password)
        await user_repository.save(db, user)
        logger.info(f"Password changed successfully for user: {user.id}")

    async def delete_account(self, db: AsyncSession, email: str, password: str) -> None:
        """비밀번호 확인 후 내 계정을 소프트 삭제합니다 (GDPR 삭제권)."""
        user: User = await self._login_or_fail(db, email, password, "Invalid credentials")
        await self.soft_delete_user(db, user.id)
        logger.info(f"Account deleted (soft delete) for user: {user.id}")

    async def export_user_data(self, db: AsyncSession, email: str, password: str) -> dict[str, Any]:
        """비밀번호 확인 후 내 개인 데이터를 내보냅니다 (GDPR 열람권/이동권).

        Returns:
            dict[str, Any]: personalData, accountMetadata, oauthIntegrations, gdprNotice
        """
        user: User = await self._login_or_fail(db, email, password, "Invalid credentials")
        logger.info(f"Data export completed for user: {user.id}")
        return {
            "personalData": {
                "name": user.name,
                "email": user.email,
                "emailVerified": user.email_verified,
                "emailVerifiedAt": user.email_verified_at.isoformat() if user.email_verified_at else None,
                "avatarPath": user.avatar_path,
            },
            "accountMetadata": {
                "createdAt": user.created_at.isoformat() if user.created_at else None,
                "updatedAt": user.updated_at.isoformat() if user.updated_at else None,
            },
            "oauthIntegrations": {
                "googleLinked": user.google_id is not None,
                "microsoftLinked": user.microsoft_id is not None,
            },
            "gdprNotice": GDPR_NOTICE,
        }

    async def setup_password_with_token(self, db: AsyncSession, token: str | None, password: str | None) -> None:
        """메일로 받은 토큰으로 비밀번호를 설정합니다.

        Set the initial password from a setup link. The token is single-use.

        Raises:
            BadRequestError: 빈 값, 무효/만료/사용된 토큰, 정책 위반
                             (Blank input, invalid token or weak password)
        """
        if not (token or "").strip():
            raise BadRequestError("Token must not be null or blank")
        if not (password or "").strip():
            raise BadRequestError("Password must not be null or blank")

        setup_token: PasswordSetupToken | None = await password_setup_token_repository.find_by_token(db, token)
        if setup_token is None or setup_token.is_deleted or not setup_token.is_valid:
            raise BadRequestError("Invalid or expired password setup token")

        _require_password_policy(password)

        user: User = await user_repository.find_by_id_or_fail(db, setup_token.user_id)
        user.password = hash_password(password)
        setup_token.mark_as_used()
        await db.flush()
        logger.info(f"Password set via setup token for user: {user.id}")


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
