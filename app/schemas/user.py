"""회원, 역할 및 계정 관련 Pydantic 요청/응답 스키마 정의.

Member, Role and Account Pydantic request/response schema definitions.
Covers admin member management, role management and member self-service
(profile, password, account deletion, data export).
"""

from datetime import date, datetime

from pydantic import BaseModel


# === 역할 (Role) 스키마 ===

class RoleCreate(BaseModel):
    """역할 생성 요청 스키마.

    Attributes:
        name: 역할 이름 (Role name, 2-100 chars, unique)
    """

    name: str


class RoleResponse(BaseModel):
    """역할 응답 스키마."""

    id: str
    name: str
    created_at: datetime


# === 회원 (User) 스키마 ===

class UserCreate(BaseModel):
    """회원 생성 요청 스키마 (관리자용).

    Member creation request schema (admin-only operation).
    Without a password the member receives a password setup link by email.

    Attributes:
        name: 이름 (Display name)
        email: 이메일 (Login email, unique)
        password: 비밀번호 (Optional, validated and bcrypt-hashed)
        of_mg: 정회원 여부 (Regular member flag)
    """

    name: str
    email: str
    password: str | None = None  # 없으면 설정 링크 발송 (Setup link is mailed when omitted)
    salutation: str | None = None
    academic_title: str | None = None
    rank: str | None = None
    birthday: date | None = None
    phone: str | None = None
    street: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str | None = None
    of_mg: bool = False


class UserUpdate(BaseModel):
    """회원 수정 요청 스키마 (관리자용, 부분 업데이트).

    Member update request schema (admin, partial update).
    Name and email are applied only when non-blank; other fields whenever
    they are sent (an empty string clears the field).
    """

    name: str | None = None
    email: str | None = None
    salutation: str | None = None
    academic_title: str | None = None
    rank: str | None = None
    birthday: date | None = None
    phone: str | None = None
    street: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str | None = None
    of_mg: bool | None = None


class UserResponse(BaseModel):
    """회원 상세 응답 스키마.

    Member detail response schema with role names.
    """

    id: str  # 회원 UUID 문자열 (Member UUID as string)
    name: str
    email: str
    email_verified: bool
    email_verified_at: datetime | None = None
    avatar_path: str | None = None
    salutation: str | None = None
    academic_title: str | None = None
    rank: str | None = None
    birthday: date | None = None
    phone: str | None = None
    street: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str | None = None
    of_mg: bool
    roles: list[str] = []  # 역할 이름 목록 (Role names)
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None  # 소프트 삭제 일시 (Soft-delete timestamp)


# === 계정 (Account self-service) 스키마 ===

class ProfileUpdateRequest(BaseModel):
    """내 프로필 수정 요청 스키마. 비어 있는 값은 무시됩니다."""

    name: str | None = None
    email: str | None = None


class PasswordChangeRequest(BaseModel):
    """비밀번호 변경 요청 스키마."""

    current_password: str
    new_password: str


class PasswordConfirmRequest(BaseModel):
    """비밀번호 확인이 필요한 계정 작업 요청 (탈퇴, 데이터 내보내기).

    Password confirmation for account deletion and data export.
    """

    password: str
