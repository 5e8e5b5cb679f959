"""앱 계정 API 테스트 — 프로필, 비밀번호 변경, 탈퇴, 데이터 내보내기."""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.utils.password import verify_password
from tests.conftest import MEMBER_PASSWORD, auth_header

URL = "/api/v1/app/account"


class TestProfile:
    """내 프로필 수정 테스트."""

    async def test_update_name_and_email(self, client: AsyncClient, member_token):
        res = await client.put(
            f"{URL}/profile",
            json={"name": "  Max M.  ", "email": "Max.M@Example.com"},
            headers=auth_header(member_token),
        )
        assert res.status_code == 200
        data = res.json()
        assert data["name"] == "Max M."
        assert data["email"] == "max.m@example.com"

    async def test_blank_values_are_ignored(self, client: AsyncClient, member_token):
        res = await client.put(f"{URL}/profile", json={"name": " ", "email": ""}, headers=auth_header(member_token))
        assert res.status_code == 200
        assert res.json()["name"] == "Max Mustermann"
        assert res.json()["email"] == "max@example.com"

    async def test_email_taken(self, client: AsyncClient, member_token, supporting_user):
        res = await client.put(
            f"{URL}/profile", json={"email": "erika@example.com"}, headers=auth_header(member_token)
        )
        assert res.status_code == 409

    async def test_requires_auth(self, client: AsyncClient):
        res = await client.put(f"{URL}/profile", json={"name": "Niemand"})
        assert res.status_code in (401, 403)


class TestChangePassword:
    """비밀번호 변경 테스트."""

    async def test_change_password(self, client: AsyncClient, member_user: User, member_token):
        res = await client.put(
            f"{URL}/password",
            json={"current_password": MEMBER_PASSWORD, "new_password": "Bunker#Zm9x"},
            headers=auth_header(member_token),
        )
        assert res.status_code == 200
        assert res.json()["message"] == "Password changed successfully"
        assert verify_password("Bunker#Zm9x", member_user.password)

    async def test_wrong_current_password(self, client: AsyncClient, member_token):
        res = await client.put(
            f"{URL}/password",
            json={"current_password": "Falsch!9Qz", "new_password": "Bunker#Zm9x"},
            headers=auth_header(member_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"] == "Invalid current password"

    async def test_same_password(self, client: AsyncClient, member_token):
        res = await client.put(
            f"{URL}/password",
            json={"current_password": MEMBER_PASSWORD, "new_password": MEMBER_PASSWORD},
            headers=auth_header(member_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"] == "New password must be different from current password"

    async def test_weak_new_password(self, client: AsyncClient, member_token):
        res = await client.put(
            f"{URL}/password",
            json={"current_password": MEMBER_PASSWORD, "new_password": "short"},
            headers=auth_header(member_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"].startswith("New password validation failed")

    async def test_blank_new_password(self, client: AsyncClient, member_token):
        res = await client.put(
            f"{URL}/password",
            json={"current_password": MEMBER_PASSWORD, "new_password": "  "},
            headers=auth_header(member_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"] == "New password must not be null or blank"


class TestDeleteAccount:
    """탈퇴 테스트."""

    async def test_delete_account(self, client: AsyncClient, db: AsyncSession, member_user: User, member_token):
        res = await client.post(f"{URL}/delete", json={"password": MEMBER_PASSWORD}, headers=auth_header(member_token))
        assert res.status_code == 200
        assert res.json()["message"] == "Account deleted successfully"
        assert member_user.is_deleted

        # 삭제된 회원의 토큰은 더 이상 유효하지 않음
        res = await client.get("/api/v1/app/auth/me", headers=auth_header(member_token))
        assert res.status_code == 401

    async def test_wrong_password(self, client: AsyncClient, member_user: User, member_token):
        res = await client.post(f"{URL}/delete", json={"password": "Falsch!9Qz"}, headers=auth_header(member_token))
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid credentials"
        assert not member_user.is_deleted

    async def test_blank_password(self, client: AsyncClient, member_token):
        res = await client.post(f"{URL}/delete", json={"password": ""}, headers=auth_header(member_token))
        assert res.status_code == 400


class TestExportData:
    """개인 데이터 내보내기 테스트."""

    async def test_export(self, client: AsyncClient, member_token):
        res = await client.post(f"{URL}/export", json={"password": MEMBER_PASSWORD}, headers=auth_header(member_token))
        assert res.status_code == 200
        data = res.json()
        assert set(data) == {"personalData", "accountMetadata", "oauthIntegrations", "gdprNotice"}
        assert data["personalData"]["email"] == "max@example.com"
        assert data["oauthIntegrations"] == {"googleLinked": False, "microsoftLinked": False}
        assert "GDPR" in data["gdprNotice"]

    async def test_export_wrong_password(self, client: AsyncClient, member_token):
        res = await client.post(f"{URL}/export", json={"password": "Falsch!9Qz"}, headers=auth_header(member_token))
        assert res.status_code == 401
