"""역할 API 테스트.

Role API tests — Creation with name rules, deletion, and granting or
revoking roles on members.
"""

import uuid

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import user_roles
from tests.conftest import auth_header, make_token

URL = "/api/v1/admin/roles"


class TestRoleCreate:
    """역할 생성 테스트."""

    async def test_create_role(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={"name": "  Kassenwart "}, headers=auth_header(admin_token))
        assert res.status_code == 201
        assert res.json()["name"] == "Kassenwart"

    async def test_duplicate_name_case_insensitive(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={"name": "admin"}, headers=auth_header(admin_token))
        assert res.status_code == 409
        assert res.json()["detail"] == "A role with this name already exists"

    async def test_name_too_short(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={"name": "X"}, headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "Role name must be between 2 and 100 characters"

    async def test_name_too_long(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={"name": "R" * 101}, headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_member_forbidden(self, client: AsyncClient, member_token):
        res = await client.post(URL, json={"name": "HACKER"}, headers=auth_header(member_token))
        assert res.status_code == 403


class TestRoleRead:
    """역할 조회 테스트."""

    async def test_list_sorted_by_name(self, client: AsyncClient, admin_token, member_role):
        await client.post(URL, json={"name": "Beirat"}, headers=auth_header(admin_token))
        res = await client.get(URL, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert [r["name"] for r in res.json()] == ["ADMIN", "Beirat", "MEMBER"]


class TestRoleAssignment:
    """역할 부여/회수 테스트."""

    async def test_assign_role_grants_admin_access(self, client: AsyncClient, admin_token, admin_role, member_user):
        member_token = make_token(member_user)
        assert (await client.get("/api/v1/admin/users", headers=auth_header(member_token))).status_code == 403

        res = await client.post(f"{URL}/{admin_role.id}/users/{member_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["roles"] == ["ADMIN", "MEMBER"]

        assert (await client.get("/api/v1/admin/users", headers=auth_header(member_token))).status_code == 200

    async def test_assign_twice_is_noop(self, client: AsyncClient, admin_token, member_role, member_user):
        res = await client.post(f"{URL}/{member_role.id}/users/{member_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["roles"] == ["MEMBER"]

    async def test_remove_role(self, client: AsyncClient, admin_token, member_role, member_user):
        res = await client.delete(f"{URL}/{member_role.id}/users/{member_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["roles"] == []

    async def test_assign_unknown_role(self, client: AsyncClient, admin_token, member_user):
        res = await client.post(f"{URL}/{uuid.uuid4()}/users/{member_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 404


class TestRoleDelete:
    """역할 삭제 테스트."""

    async def test_delete_role_removes_links(
        self, client: AsyncClient, db: AsyncSession, admin_token, member_role, member_user
    ):
        res = await client.delete(f"{URL}/{member_role.id}", headers=auth_header(admin_token))
        assert res.status_code == 204

        links = (await db.execute(select(user_roles).where(user_roles.c.role_id == member_role.id))).all()
        assert links == []

    async def test_delete_missing_role(self, client: AsyncClient, admin_token):
        res = await client.delete(f"{URL}/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404
