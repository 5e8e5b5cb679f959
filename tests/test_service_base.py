"""제네릭 서비스 훅 테스트.

BaseService tests — Hook ordering for create, update and delete, and the
translation of soft-delete state errors into 400 responses.
"""

import uuid
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import Role
from app.repositories.role_repository import role_repository
from app.services.base import BaseService
from app.utils.exceptions import BadRequestError


class RecordingRoleService(BaseService[Role]):
    """모든 훅 호출을 기록하는 테스트용 서비스."""

    def __init__(self) -> None:
        super().__init__(role_repository)
        self.calls: list[str] = []

    async def validate_for_create(self, db: AsyncSession, data: dict[str, Any]) -> None:
        self.calls.append("validate_for_create")
        if data.get("name") == "REJECT":
            raise BadRequestError("rejected")

    async def apply_business_rules_for_create(self, db: AsyncSession, data: dict[str, Any]) -> dict[str, Any]:
        self.calls.append("apply_business_rules_for_create")
        return {**data, "name": data["name"].upper()}

    async def after_create(self, db: AsyncSession, entity: Role) -> None:
        self.calls.append("after_create")

    async def validate_for_update(self, db: AsyncSession, record_id: uuid.UUID, data: dict[str, Any]) -> None:
        self.calls.append("validate_for_update")

    async def apply_business_rules_for_update(
        self, db: AsyncSession, record_id: uuid.UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        self.calls.append("apply_business_rules_for_update")
        return data

    async def after_update(self, db: AsyncSession, entity: Role) -> None:
        self.calls.append("after_update")

    async def validate_for_delete(self, db: AsyncSession, record_id: uuid.UUID) -> None:
        self.calls.append("validate_for_delete")

    async def apply_business_rules_for_delete(self, db: AsyncSession, record_id: uuid.UUID) -> None:
        self.calls.append("apply_business_rules_for_delete")

    async def after_delete(self, db: AsyncSession, record_id: uuid.UUID) -> None:
        self.calls.append("after_delete")


@pytest.fixture
def service() -> RecordingRoleService:
    return RecordingRoleService()


class TestCreateHooks:
    """생성 훅 순서 테스트."""

    async def test_hook_order_and_rules_applied(self, db: AsyncSession, service: RecordingRoleService):
        role = await service.create(db, {"name": "vorstand"})
        assert role.name == "VORSTAND"
        assert service.calls == [
            "validate_for_create",
            "apply_business_rules_for_create",
            "after_create",
        ]

    async def test_validation_failure_stops_create(self, db: AsyncSession, service: RecordingRoleService):
        with pytest.raises(BadRequestError):
            await service.create(db, {"name": "REJECT"})
        assert service.calls == ["validate_for_create"]
        assert await service.count(db) == 0

    async def test_create_many_runs_hooks_per_row(self, db: AsyncSession, service: RecordingRoleService):
        roles = await service.create_many(db, [{"name": "a1"}, {"name": "b2"}])
        assert [r.name for r in roles] == ["A1", "B2"]
        assert service.calls.count("after_create") == 2

    async def test_create_all_runs_hooks_per_entity(self, db: AsyncSession, service: RecordingRoleService):
        roles = await service.create_all(db, [Role(name="x1"), Role(name="y2")])
        assert [r.name for r in roles] == ["X1", "Y2"]
        assert service.calls.count("validate_for_create") == 2
        assert service.calls.count("after_create") == 2


class TestUpdateHooks:
    """수정 훅 테스트."""

    async def test_update_hooks(self, db: AsyncSession, service: RecordingRoleService):
        role = await role_repository.create(db, {"name": "OLD"})
        updated = await service.update(db, role.id, {"name": "NEW"})
        assert updated is not None and updated.name == "NEW"
        assert service.calls == [
            "validate_for_update",
            "apply_business_rules_for_update",
            "after_update",
        ]

    async def test_update_missing_skips_after_hook(self, db: AsyncSession, service: RecordingRoleService):
        assert await service.update(db, uuid.uuid4(), {"name": "X"}) is None
        assert "after_update" not in service.calls


class TestDeleteHooks:
    """삭제 훅 테스트."""

    async def test_delete_runs_after_hook(self, db: AsyncSession, service: RecordingRoleService):
        role = await role_repository.create(db, {"name": "GONE"})
        assert await service.delete_by_id(db, role.id) is True
        assert service.calls == [
            "validate_for_delete",
            "apply_business_rules_for_delete",
            "after_delete",
        ]

    async def test_delete_missing_skips_after_hook(self, db: AsyncSession, service: RecordingRoleService):
        assert await service.delete_by_id(db, uuid.uuid4()) is False
        assert "after_delete" not in service.calls


class TestSoftDelete:
    """소프트 삭제 상태 오류 테스트."""

    async def test_soft_delete_twice_is_bad_request(self, db: AsyncSession, service: RecordingRoleService):
        role = await role_repository.create(db, {"name": "TWICE"})
        await service.soft_delete(db, role.id)
        with pytest.raises(BadRequestError) as exc:
            await service.soft_delete(db, role.id)
        assert exc.value.status_code == 400

    async def test_restore_active_is_bad_request(self, db: AsyncSession, service: RecordingRoleService):
        role = await role_repository.create(db, {"name": "ACTIVE"})
        with pytest.raises(BadRequestError):
            await service.restore(db, role.id)

    async def test_active_and_deleted_views(self, db: AsyncSession, service: RecordingRoleService):
        keep = await role_repository.create(db, {"name": "KEEP"})
        drop = await role_repository.create(db, {"name": "DROP"})
        await service.soft_delete(db, drop.id)
        assert [r.id for r in await service.get_active(db)] == [keep.id]
        assert [r.id for r in await service.get_deleted(db)] == [drop.id]
