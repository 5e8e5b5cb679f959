"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers login, registration, token issuance/refresh, password setup and
current user info.
"""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema.

    Attributes:
        email: 로그인 이메일 (Login email, case-insensitive)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    email: str
    password: str  # 비밀번호 — 평문, 서버에서 bcrypt 해시와 비교 (Plain text, compared to bcrypt hash)


class RegisterRequest(BaseModel):
    """회원가입 요청 스키마.

    Self-registration request schema.

    Attributes:
        name: 이름 (Display name)
        email: 이메일 (Login email)
        password: 비밀번호 (Plain text, validated then bcrypt-hashed)
        recaptcha_token: reCAPTCHA 응답 토큰 (Required when reCAPTCHA is enabled)
    """

    name: str | None = None
    email: str | None = None
    password: str | None = None
    recaptcha_token: str | None = None


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    JWT token issuance response schema.

    Attributes:
        access_token: JWT 액세스 토큰 (Short-lived access token)
        refresh_token: JWT 리프레시 토큰 (Long-lived refresh token)
        token_type: 토큰 유형 (Always "bearer" for Authorization header)
    """

    access_token: str  # JWT 액세스 토큰 — 만료: 30분 기본 (Access token, default TTL: 30min)
    refresh_token: str  # JWT 리프레시 토큰 — 만료: 7일 기본 (Refresh token, default TTL: 7 days)
    token_type: str = "bearer"


class LoginUser(BaseModel):
    """로그인 응답에 포함되는 회원 요약."""

    id: str
    name: str
    email: str
    email_verified: bool


class LoginResponse(TokenResponse):
    """로그인 응답 스키마 — 토큰과 회원 요약.

    Login response schema: token pair plus a short member summary.
    """

    user: LoginUser


class RefreshRequest(BaseModel):
    """토큰 갱신/로그아웃 요청 스키마. (Refresh token exchange or revoke)"""

    refresh_token: str  # 기존 리프레시 토큰 (Current refresh token)


class SetupPasswordRequest(BaseModel):
    """비밀번호 설정 링크 요청 스키마.

    Password setup request sent from the link in the welcome email.

    Attributes:
        token: 설정 토큰 (Setup token from the link)
        password: 새 비밀번호 (New password)
    """

    token: str | None = None
    password: str | None = None


class UserMeResponse(BaseModel):
    """현재 사용자 정보 응답 스키마 (GET /me).

    Current user info response schema for the /me endpoint.

    Attributes:
        id: 회원 UUID (Member unique identifier)
        name: 이름 (Display name)
        email: 이메일 (Login email)
        email_verified: 이메일 인증 여부 (Email verified flag)
        avatar_path: 프로필 사진 객체 키 (Profile picture object key)
        of_mg: 정회원 여부 (Regular member flag)
        roles: 역할 이름 목록 (Role names)
        is_admin: 관리자 여부 (Holds the ADMIN role)
    """

    id: str
    name: str
    email: str
    email_verified: bool
    avatar_path: str | None
    of_mg: bool
    roles: list[str] = []
    is_admin: bool
