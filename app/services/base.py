"""기본 서비스 — 훅 기반 CRUD 비즈니스 로직.

Base Service — Hook-driven CRUD business logic shared by all services.
Each write runs validate -> business rules -> repository call -> after hook.
Subclasses override only the hooks they need; every hook is a no-op here.

Usage:
    class RoleService(BaseService[Role]):
        def __init__(self) -> None:
            super().__init__(role_repository)

        async def validate_for_create(self, db, data) -> None:
            ...
"""

from typing import Any, Generic, Sequence
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.base import BaseRepository, ModelType
from app.utils.exceptions import BadRequestError


class BaseService(Generic[ModelType]):
    """제네릭 CRUD 서비스.

    Generic CRUD service wrapping a repository with lifecycle hooks.

    Attributes:
        repository: 위임 대상 레포지토리 (Repository the service delegates to)
    """

    def __init__(self, repository: BaseRepository[ModelType]) -> None:
        self.repository: BaseRepository[ModelType] = repository

    @property
    def entity_name(self) -> str:
        return self.repository.entity_name

    # ------------------------------------------------------------------
    # 훅 — Hooks (no-ops by default)
    # ------------------------------------------------------------------

    async def validate_for_create(self, db: AsyncSession, data: dict[str, Any]) -> None:
        """생성 전 검증. 실패 시 HTTP 예외를 발생시킵니다."""

    async def apply_business_rules_for_create(
        self, db: AsyncSession, data: dict[str, Any]
    ) -> dict[str, Any]:
        """생성 데이터에 비즈니스 규칙 적용 (정규화, 기본값 등)."""
        return data

    async def after_create(self, db: AsyncSession, entity: ModelType) -> None:
        pass

    async def validate_for_update(
        self, db: AsyncSession, record_id: UUID, data: dict[str, Any]
    ) -> None:
        pass

    async def apply_business_rules_for_update(
        self, db: AsyncSession, record_id: UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        return data

    async def after_update(self, db: AsyncSession, entity: ModelType) -> None:
        pass

    async def validate_for_delete(self, db: AsyncSession, record_id: UUID) -> None:
        pass

    async def apply_business_rules_for_delete(self, db: AsyncSession, record_id: UUID) -> None:
        pass

    async def after_delete(self, db: AsyncSession, record_id: UUID) -> None:
        pass

    # ------------------------------------------------------------------
    # 조회 — Reads
    # ------------------------------------------------------------------

    async def get_all(self, db: AsyncSession) -> list[ModelType]:
        return await self.repository.find_all(db)

    async def get_by_id(self, db: AsyncSession, record_id: UUID) -> ModelType | None:
        return await self.repository.find_by_id(db, record_id)

    async def get_by_id_or_fail(self, db: AsyncSession, record_id: UUID) -> ModelType:
        return await self.repository.find_by_id_or_fail(db, record_id)

    async def get_page(
        self, db: AsyncSession, page: int = 0, size: int = 20
    ) -> tuple[Sequence[ModelType], int]:
        return await self.repository.find_page(db, page, size)

    async def count(self, db: AsyncSession) -> int:
        return await self.repository.count(db)

    async def exists_by_id(self, db: AsyncSession, record_id: UUID) -> bool:
        return await self.repository.exists_by_id(db, record_id)

    async def get_active(self, db: AsyncSession) -> list[ModelType]:
        return await self.repository.find_active(db)

    async def get_deleted(self, db: AsyncSession) -> list[ModelType]:
        return await self.repository.find_deleted(db)

    # ------------------------------------------------------------------
    # 쓰기 — Writes
    # ------------------------------------------------------------------

    async def create(self, db: AsyncSession, data: dict[str, Any]) -> ModelType:
        """훅을 거쳐 레코드를 생성합니다.

        Create a record: validate, apply business rules, persist, then run
        the after-create hook.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 생성 필드 맵 (Field map for the new record)

        Returns:
            ModelType: 생성된 레코드 (Created record)
        """
        await self.validate_for_create(db, data)
        prepared: dict[str, Any] = await self.apply_business_rules_for_create(db, data)
        entity: ModelType = await self.repository.create(db, prepared)
        await self.after_create(db, entity)
        logger.info(f"{self.entity_name} created: {entity.id}")
        return entity

    async def create_many(self, db: AsyncSession, rows: list[dict[str, Any]]) -> list[ModelType]:
        """여러 필드 맵을 한 건씩 훅을 거쳐 생성합니다."""
        return [await self.create(db, row) for row in rows]

    async def create_all(self, db: AsyncSession, entities: list[ModelType]) -> list[ModelType]:
        """모델 인스턴스 목록을 저장합니다. 인스턴스마다 after_create 훅을 실행합니다.

        Persist ready-made instances. Validation and rules see each instance's
        column values as a field map.
        """
        saved: list[ModelType] = []
        for entity in entities:
            data: dict[str, Any] = {
                column.key: getattr(entity, column.key)
                for column in entity.__table__.columns
                if getattr(entity, column.key) is not None
            }
            await self.validate_for_create(db, data)
            prepared: dict[str, Any] = await self.apply_business_rules_for_create(db, data)
            self.repository.apply_changes(entity, prepared)
            persisted: ModelType = await self.repository.add(db, entity)
            await self.after_create(db, persisted)
            saved.append(persisted)
        return saved

    async def update(
        self, db: AsyncSession, record_id: UUID, data: dict[str, Any]
    ) -> ModelType | None:
        """훅을 거쳐 레코드를 수정합니다. 없으면 None. (None when missing)"""
        await self.validate_for_update(db, record_id, data)
        prepared: dict[str, Any] = await self.apply_business_rules_for_update(db, record_id, data)
        entity: ModelType | None = await self.repository.update(db, record_id, prepared)
        if entity is not None:
            await self.after_update(db, entity)
        return entity

    async def update_or_fail(
        self, db: AsyncSession, record_id: UUID, data: dict[str, Any]
    ) -> ModelType:
        await self.validate_for_update(db, record_id, data)
        prepared: dict[str, Any] = await self.apply_business_rules_for_update(db, record_id, data)
        entity: ModelType = await self.repository.update_or_fail(db, record_id, prepared)
        await self.after_update(db, entity)
        return entity

    async def delete_by_id(self, db: AsyncSession, record_id: UUID) -> bool:
        """훅을 거쳐 영구 삭제합니다. after_delete는 실제 삭제된 경우에만 실행됩니다."""
        await self.validate_for_delete(db, record_id)
        await self.apply_business_rules_for_delete(db, record_id)
        deleted: bool = await self.repository.delete_by_id(db, record_id)
        if deleted:
            await self.after_delete(db, record_id)
            logger.info(f"{self.entity_name} deleted: {record_id}")
        return deleted

    async def soft_delete(self, db: AsyncSession, record_id: UUID) -> ModelType:
        """소프트 삭제. 이미 삭제된 경우 400.

        Raises:
            NotFoundError: 레코드 없음 (Record not found)
            BadRequestError: 이미 삭제됨 (Already deleted)
        """
        try:
            entity: ModelType = await self.repository.soft_delete_by_id(db, record_id)
        except ValueError as e:
            raise BadRequestError(str(e))
        logger.info(f"{self.entity_name} soft-deleted: {record_id}")
        return entity

    async def restore(self, db: AsyncSession, record_id: UUID) -> ModelType:
        """소프트 삭제 복구. 삭제되지 않은 경우 400."""
        try:
            entity: ModelType = await self.repository.restore_by_id(db, record_id)
        except ValueError as e:
            raise BadRequestError(str(e))
        logger.info(f"{self.entity_name} restored: {record_id}")
        return entity
