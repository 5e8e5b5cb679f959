"""앱 인증 API 테스트.

App auth API tests — Registration, login with lockout, token rotation,
logout, /me and the password setup link.
"""

from datetime import timedelta

import jwt
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.base import utcnow
from app.models.token import PasswordSetupToken
from app.utils.jwt import decode_token
from tests.conftest import MEMBER_PASSWORD, auth_header, create_member

URL = "/api/v1/app/auth"


async def _login(client: AsyncClient, email: str, password: str):
    return await client.post(f"{URL}/login", json={"email": email, "password": password})


class TestRegister:
    """회원가입 테스트."""

    async def test_register(self, client: AsyncClient):
        res = await client.post(f"{URL}/register", json={
            "name": "Neue Person",
            "email": "Neu@Example.com",
            "password": "Bunker#Zm9x",
        })
        assert res.status_code == 201
        data = res.json()
        assert data["email"] == "neu@example.com"
        assert data["is_admin"] is False
        assert data["roles"] == []

    async def test_register_missing_name(self, client: AsyncClient):
        res = await client.post(f"{URL}/register", json={"email": "a@example.com", "password": "Bunker#Zm9x"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Name is required"

    async def test_register_weak_password(self, client: AsyncClient):
        res = await client.post(f"{URL}/register", json={
            "name": "Schwach", "email": "weak@example.com", "password": "abc",
        })
        assert res.status_code == 400
        assert "Password validation failed" in res.json()["detail"]

    async def test_register_duplicate(self, client: AsyncClient, member_user):
        res = await client.post(f"{URL}/register", json={
            "name": "Doppelt", "email": "max@example.com", "password": "Bunker#Zm9x",
        })
        assert res.status_code == 409

    async def test_register_recaptcha_required_when_enabled(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "RECAPTCHA_ENABLED", True)
        res = await client.post(f"{URL}/register", json={
            "name": "Bot", "email": "bot@example.com", "password": "Bunker#Zm9x",
        })
        assert res.status_code == 400


class TestLogin:
    """로그인 및 잠금 테스트."""

    async def test_login_success(self, client: AsyncClient, member_user):
        res = await _login(client, "MAX@example.com", MEMBER_PASSWORD)
        assert res.status_code == 200
        data = res.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["email"] == "max@example.com"

        payload = decode_token(data["access_token"])
        assert payload["sub"] == str(member_user.id)
        assert payload["type"] == "access"

    async def test_wrong_password(self, client: AsyncClient, member_user):
        res = await _login(client, "max@example.com", "Falsch!9Qz")
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid email or password"

    async def test_unknown_email(self, client: AsyncClient):
        res = await _login(client, "nobody@example.com", "Falsch!9Qz")
        assert res.status_code == 401

    async def test_blank_credentials(self, client: AsyncClient):
        res = await _login(client, " ", "")
        assert res.status_code == 400

    async def test_deleted_member_cannot_login(self, client: AsyncClient, db: AsyncSession, member_user):
        member_user.soft_delete()
        await db.flush()
        res = await _login(client, "max@example.com", MEMBER_PASSWORD)
        assert res.status_code == 401

    async def test_lockout_after_five_failures(self, client: AsyncClient, member_user):
        for _ in range(5):
            res = await _login(client, "max@example.com", "Falsch!9Qz")
            assert res.status_code == 401

        # 잠금 중에는 올바른 비밀번호도 거부
        res = await _login(client, "max@example.com", MEMBER_PASSWORD)
        assert res.status_code == 429
        assert "temporarily locked" in res.json()["detail"]

    async def test_success_resets_counter(self, client: AsyncClient, member_user):
        for _ in range(4):
            await _login(client, "max@example.com", "Falsch!9Qz")
        assert (await _login(client, "max@example.com", MEMBER_PASSWORD)).status_code == 200
        for _ in range(4):
            await _login(client, "max@example.com", "Falsch!9Qz")
        assert (await _login(client, "max@example.com", MEMBER_PASSWORD)).status_code == 200


class TestTokens:
    """토큰 갱신/로그아웃 테스트."""

    async def test_refresh_rotates_token(self, client: AsyncClient, member_user):
        tokens = (await _login(client, "max@example.com", MEMBER_PASSWORD)).json()

        res = await client.post(f"{URL}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 200
        rotated = res.json()
        assert rotated["refresh_token"] != tokens["refresh_token"]

        # 이전 리프레시 토큰은 재사용 불가
        res = await client.post(f"{URL}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 401

    async def test_refresh_unknown_token(self, client: AsyncClient):
        res = await client.post(f"{URL}/refresh", json={"refresh_token": "unknown"})
        assert res.status_code == 401

    async def test_access_token_cannot_be_used_as_refresh(self, client: AsyncClient, member_user):
        tokens = (await _login(client, "max@example.com", MEMBER_PASSWORD)).json()
        res = await client.post(f"{URL}/refresh", json={"refresh_token": tokens["access_token"]})
        assert res.status_code == 401

    async def test_refresh_token_cannot_be_used_as_access(self, client: AsyncClient, member_user):
        tokens = (await _login(client, "max@example.com", MEMBER_PASSWORD)).json()
        res = await client.get(f"{URL}/me", headers=auth_header(tokens["refresh_token"]))
        assert res.status_code == 401

    async def test_expired_access_token(self, client: AsyncClient, member_user):
        expired = jwt.encode(
            {"sub": str(member_user.id), "type": "access", "exp": utcnow() - timedelta(minutes=1)},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        res = await client.get(f"{URL}/me", headers=auth_header(expired))
        assert res.status_code == 401

    async def test_logout_revokes_refresh_token(self, client: AsyncClient, member_user):
        tokens = (await _login(client, "max@example.com", MEMBER_PASSWORD)).json()
        res = await client.post(f"{URL}/logout", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 204
        res = await client.post(f"{URL}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 401


class TestMe:
    """/me 테스트."""

    async def test_me(self, client: AsyncClient, admin_token):
        res = await client.get(f"{URL}/me", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["email"] == "admin@bunkermuseum.com"
        assert data["is_admin"] is True
        assert data["roles"] == ["ADMIN"]


class TestSetupPassword:
    """비밀번호 설정 링크 테스트."""

    async def _setup_token(self, db: AsyncSession, **overrides) -> PasswordSetupToken:
        user = await create_member(db, "Ohne Passwort", "neu@example.com", password=None)
        token = PasswordSetupToken(
            user_id=user.id,
            token=overrides.pop("token", "setup-token-123"),
            expires_at=overrides.pop("expires_at", utcnow() + timedelta(hours=24)),
            **overrides,
        )
        db.add(token)
        await db.flush()
        return token

    async def test_setup_password_then_login(self, client: AsyncClient, db: AsyncSession):
        await self._setup_token(db)
        res = await client.post(f"{URL}/setup-password", json={"token": "setup-token-123", "password": "Bunker#Zm9x"})
        assert res.status_code == 200

        assert (await _login(client, "neu@example.com", "Bunker#Zm9x")).status_code == 200

        token = (await db.execute(select(PasswordSetupToken))).scalar_one()
        assert token.used_at is not None

    async def test_token_is_single_use(self, client: AsyncClient, db: AsyncSession):
        await self._setup_token(db)
        body = {"token": "setup-token-123", "password": "Bunker#Zm9x"}
        assert (await client.post(f"{URL}/setup-password", json=body)).status_code == 200
        res = await client.post(f"{URL}/setup-password", json=body)
        assert res.status_code == 400
        assert res.json()["detail"] == "Invalid or expired password setup token"

    async def test_expired_token(self, client: AsyncClient, db: AsyncSession):
        await self._setup_token(db, expires_at=utcnow() - timedelta(minutes=1))
        res = await client.post(f"{URL}/setup-password", json={"token": "setup-token-123", "password": "Bunker#Zm9x"})
        assert res.status_code == 400

    async def test_blank_token(self, client: AsyncClient):
        res = await client.post(f"{URL}/setup-password", json={"token": " ", "password": "Bunker#Zm9x"})
        assert res.status_code == 400
        assert res.json()["detail"] == "Token must not be null or blank"

    async def test_weak_password(self, client: AsyncClient, db: AsyncSession):
        await self._setup_token(db)
        res = await client.post(f"{URL}/setup-password", json={"token": "setup-token-123", "password": "12345678"})
        assert res.status_code == 400
