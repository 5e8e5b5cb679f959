"""회원 및 역할 관련 SQLAlchemy ORM 모델 정의.

Member and Role SQLAlchemy ORM model definitions.
Members hold many roles through the user_roles association table; the
ADMIN role unlocks the administration endpoints.

Tables:
    - roles: 역할 (Named roles, e.g. ADMIN)
    - users: 회원 계정 (Member accounts with contact and address data)
    - user_roles: 회원-역할 연결 (Member to role association)
"""

from datetime import date, datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, String, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.base import SoftDeleteMixin

ADMIN_ROLE_NAME: str = "ADMIN"

# 회원-역할 다대다 연결 테이블 — Many-to-many association (CASCADE on both sides)
user_roles: Table = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(SoftDeleteMixin, Base):
    """역할 모델 — 회원에게 부여되는 이름 있는 권한.

    Role model — Named permission assigned to members.
    Names are unique; comparison against ADMIN is case-insensitive.

    Attributes:
        name: 역할 이름 (Role name, 2-100 chars, unique)

    Relationships:
        users: 이 역할을 가진 회원 목록 (Members holding this role)
    """

    __tablename__ = "roles"

    # 역할 이름 — Role display name (e.g. "ADMIN")
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    users: Mapped[list["User"]] = relationship(
        "User", secondary=user_roles, back_populates="roles"
    )


class User(SoftDeleteMixin, Base):
    """회원 모델 — 회원 계정, 연락처 및 주소 정보.

    User model — Member account, contact and address information.
    Email is globally unique and stored lowercase. The password hash stays
    NULL for accounts created by an administrator until the member completes
    the password setup link.

    Attributes:
        name: 이름 (Display name, required)
        email: 이메일 (Login email, unique)
        email_verified_at: 이메일 인증 일시 (Verification timestamp)
        password: bcrypt 해시 (bcrypt hash, NULL until setup)
        avatar_path: 프로필 사진 객체 키 (Object key of the profile picture)
        google_id / microsoft_id: OAuth 연동 식별자 (Linked OAuth subjects)
        of_mg: 정회원 여부 (True = regular member, False = supporting member)

    Relationships:
        roles: 보유 역할 (Assigned roles)
        refresh_tokens: 활성 세션 토큰 (Refresh tokens, deleted with the member)
    """

    __tablename__ = "users"

    # 이름 — Display name
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 이메일 — Login email (전역 고유, globally unique)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    # 이메일 인증 일시 — Email verification timestamp
    email_verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 비밀번호 해시 — bcrypt hash (평문 저장 금지, never store plaintext)
    password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 프로필 사진 경로 — Object key in the storage bucket
    avatar_path: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # OAuth 식별자 — Linked provider subjects
    google_id: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    microsoft_id: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)

    # 인적 사항 — Personal details
    salutation: Mapped[str | None] = mapped_column(String(20), nullable=True)
    academic_title: Mapped[str | None] = mapped_column(String(50), nullable=True)
    rank: Mapped[str | None] = mapped_column(String(50), nullable=True)
    birthday: Mapped[date | None] = mapped_column(Date, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # 주소 — Postal address
    street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # 정회원 여부 — Regular member flag (ordentliches Mitglied)
    of_mg: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # 관계 — Relationships
    roles: Mapped[list[Role]] = relationship(
        Role, secondary=user_roles, back_populates="users", lazy="selectin"
    )
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def email_verified(self) -> bool:
        return self.email_verified_at is not None

    def has_role(self, role_name: str) -> bool:
        """역할 보유 여부 (대소문자 무시). (Case-insensitive role check)"""
        wanted: str = role_name.lower()
        return any(role.name.lower() == wanted for role in self.roles or [])

    @property
    def is_admin(self) -> bool:
        return self.has_role(ADMIN_ROLE_NAME)
