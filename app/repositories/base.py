"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all domain repositories.
Provides generic create, read, update and delete operations, dynamic
field-map updates, chunked processing and soft-delete queries. Every
operation is logged at debug level; failures are logged and re-raised.

Usage:
    class BookingRepository(BaseRepository[Booking]):
        def __init__(self) -> None:
            super().__init__(Booking)
"""

import functools
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Generic, ParamSpec, Sequence, TypeVar
from uuid import UUID

from loguru import logger
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base
from app.utils.exceptions import NotFoundError
from app.utils.pagination import paginate

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)
P = ParamSpec("P")
R = TypeVar("R")


def logged_operation(name: str) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """레포지토리 작업을 로깅하는 데코레이터.

    Decorator that logs the start of a repository operation at debug level
    and logs failures with traceback before re-raising them. HTTP errors
    raised on purpose (e.g. NotFoundError) are re-raised without an error log,
    and rejected arguments (ValueError) are logged as warnings.
    """

    def decorator(func_: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func_)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            repo = args[0]
            entity: str = getattr(repo, "entity_name", type(repo).__name__)
            logger.debug(f"{entity} repository: {name}")
            try:
                return await func_(*args, **kwargs)
            except NotFoundError:
                raise
            except ValueError as e:
                logger.warning(f"{entity} repository: {name} rejected: {e}")
                raise
            except Exception:
                logger.exception(f"{entity} repository: {name} failed")
                raise

        return wrapper

    return decorator


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.
    Repositories only flush; committing is the router's job.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        """레포지토리를 초기화합니다.

        Args:
            model: 이 레포지토리가 관리할 SQLAlchemy 모델 클래스
                   (SQLAlchemy model class this repository manages)
        """
        self.model: type[ModelType] = model

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    def _apply_filters(self, query: Select, filters: dict[str, Any] | None) -> Select:
        """등호 필터 적용. 모델에 없는 컬럼은 무시합니다. (Equality filters)"""
        if filters:
            for column_name, value in filters.items():
                if hasattr(self.model, column_name):
                    query = query.where(getattr(self.model, column_name) == value)
        return query

    # ------------------------------------------------------------------
    # 조회 — Reads
    # ------------------------------------------------------------------

    @logged_operation("find_all")
    async def find_all(
        self,
        db: AsyncSession,
        filters: dict[str, Any] | None = None,
        order_by: Any | None = None,
    ) -> list[ModelType]:
        """모든 레코드를 조회합니다 (소프트 삭제 포함).

        Retrieve all records, soft-deleted ones included.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            filters: 등호 필터 {'컬럼명': 값} (Equality filters)
            order_by: 정렬 기준 (Ordering clause)

        Returns:
            list[ModelType]: 레코드 목록 (Matching records)
        """
        query: Select = self._apply_filters(select(self.model), filters)
        if order_by is not None:
            query = query.order_by(order_by)
        result = await db.execute(query)
        return list(result.scalars().all())

    @logged_operation("find_by_id")
    async def find_by_id(self, db: AsyncSession, record_id: UUID) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다. (Single record by UUID, or None)"""
        result = await db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    @logged_operation("find_by_id_or_fail")
    async def find_by_id_or_fail(self, db: AsyncSession, record_id: UUID) -> ModelType:
        """ID로 조회하고 없으면 404를 발생시킵니다.

        Raises:
            NotFoundError: "{Entity} with ID {id} not found"
        """
        entity: ModelType | None = await self.find_by_id(db, record_id)
        if entity is None:
            raise NotFoundError(f"{self.entity_name} with ID {record_id} not found")
        return entity

    @logged_operation("find_first")
    async def find_first(
        self,
        db: AsyncSession,
        filters: dict[str, Any] | None = None,
        order_by: Any | None = None,
    ) -> ModelType | None:
        """조건에 맞는 첫 레코드. (First record matching the filters)"""
        query: Select = self._apply_filters(select(self.model), filters)
        query = query.order_by(order_by if order_by is not None else self.model.created_at)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none()

    @logged_operation("find_all_by_ids")
    async def find_all_by_ids(self, db: AsyncSession, record_ids: Iterable[UUID]) -> list[ModelType]:
        ids: list[UUID] = list(record_ids)
        if not ids:
            return []
        result = await db.execute(select(self.model).where(self.model.id.in_(ids)))
        return list(result.scalars().all())

    @logged_operation("find_page")
    async def find_page(
        self,
        db: AsyncSession,
        page: int = 0,
        size: int = 20,
        order_by: Any | None = None,
        query: Select | None = None,
    ) -> tuple[Sequence[ModelType], int]:
        """페이지네이션이 적용된 레코드 목록을 조회합니다.

        Retrieve one page of records.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            page: 페이지 번호, 0부터 시작 (Page number, 0-based)
            size: 페이지당 레코드 수 (Records per page)
            order_by: 정렬 기준, 기본 created_at 내림차순 (Ordering, default newest first)
            query: 기본 SELECT 쿼리, 없으면 전체 (Base query, defaults to all rows)

        Returns:
            tuple[Sequence[ModelType], int]: (레코드 목록, 전체 개수)
        """
        base: Select = query if query is not None else select(self.model)
        base = base.order_by(order_by if order_by is not None else self.model.created_at.desc())
        return await paginate(db, base, page, size)

    @logged_operation("count")
    async def count(self, db: AsyncSession, filters: dict[str, Any] | None = None) -> int:
        query: Select = self._apply_filters(select(func.count()).select_from(self.model), filters)
        return (await db.execute(query)).scalar() or 0

    @logged_operation("exists_by_id")
    async def exists_by_id(self, db: AsyncSession, record_id: UUID) -> bool:
        return await self.count(db, {"id": record_id}) > 0

    @logged_operation("exists")
    async def exists(self, db: AsyncSession, filters: dict[str, Any]) -> bool:
        """주어진 조건에 일치하는 레코드가 존재하는지 확인합니다."""
        return await self.count(db, filters) > 0

    @logged_operation("find_active")
    async def find_active(self, db: AsyncSession) -> list[ModelType]:
        """삭제되지 않은 레코드. (Records with deleted_at IS NULL)"""
        result = await db.execute(
            select(self.model).where(self.model.deleted_at.is_(None)).order_by(self.model.created_at)
        )
        return list(result.scalars().all())

    @logged_operation("find_deleted")
    async def find_deleted(self, db: AsyncSession) -> list[ModelType]:
        """소프트 삭제된 레코드. (Records with deleted_at IS NOT NULL)"""
        result = await db.execute(
            select(self.model).where(self.model.deleted_at.is_not(None)).order_by(self.model.created_at)
        )
        return list(result.scalars().all())

    @logged_operation("find_with_deleted")
    async def find_with_deleted(self, db: AsyncSession) -> list[ModelType]:
        result = await db.execute(select(self.model).order_by(self.model.created_at))
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # 생성 — Creates
    # ------------------------------------------------------------------

    @logged_operation("add")
    async def add(self, db: AsyncSession, entity: ModelType) -> ModelType:
        """모델 인스턴스를 저장합니다. (Persist an instance: add, flush, refresh)"""
        db.add(entity)
        await db.flush()
        await db.refresh(entity)
        return entity

    @logged_operation("create")
    async def create(self, db: AsyncSession, obj_data: dict[str, Any]) -> ModelType:
        """필드 맵으로 새 레코드를 생성합니다.

        Create a new record from a field map.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            obj_data: 생성할 레코드의 데이터 딕셔너리 (Field values for the new record)

        Returns:
            ModelType: 생성된 레코드 (The created record)
        """
        return await self.add(db, self.model(**obj_data))

    @logged_operation("create_all")
    async def create_all(self, db: AsyncSession, entities: Iterable[ModelType]) -> list[ModelType]:
        """여러 인스턴스를 한 번의 flush로 저장합니다."""
        items: list[ModelType] = list(entities)
        db.add_all(items)
        await db.flush()
        for item in items:
            await db.refresh(item)
        return items

    @logged_operation("create_many")
    async def create_many(self, db: AsyncSession, rows: Iterable[dict[str, Any]]) -> list[ModelType]:
        """필드 맵 목록으로 여러 레코드를 생성합니다."""
        return await self.create_all(db, [self.model(**row) for row in rows])

    # ------------------------------------------------------------------
    # 수정 / 삭제 — Updates and deletes
    # ------------------------------------------------------------------

    def apply_changes(self, entity: ModelType, update_data: dict[str, Any]) -> ModelType:
        """필드 맵을 엔티티에 적용합니다.

        Apply a field map to an entity. Unknown fields and the primary key are
        skipped with a warning.
        """
        for field, value in update_data.items():
            if field == "id" or not hasattr(entity, field):
                logger.warning(f"{self.entity_name}: ignoring unknown field '{field}' in update")
                continue
            setattr(entity, field, value)
        return entity

    @logged_operation("update")
    async def update(
        self,
        db: AsyncSession,
        record_id: UUID,
        update_data: dict[str, Any],
    ) -> ModelType | None:
        """기존 레코드를 업데이트합니다.

        Update an existing record by its UUID with a field map.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 업데이트할 레코드의 UUID (UUID of the record to update)
            update_data: 업데이트할 필드와 값의 딕셔너리
                         (Dictionary of fields and values to update)

        Returns:
            ModelType | None: 업데이트된 레코드 또는 None (Updated record or None)
        """
        db_obj: ModelType | None = await self.find_by_id(db, record_id)
        if db_obj is None:
            return None

        self.apply_changes(db_obj, update_data)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    @logged_operation("update_or_fail")
    async def update_or_fail(
        self,
        db: AsyncSession,
        record_id: UUID,
        update_data: dict[str, Any],
    ) -> ModelType:
        db_obj: ModelType | None = await self.update(db, record_id, update_data)
        if db_obj is None:
            raise NotFoundError(f"{self.entity_name} with ID {record_id} not found")
        return db_obj

    @logged_operation("save")
    async def save(self, db: AsyncSession, entity: ModelType) -> ModelType:
        """이미 세션에 있는 엔티티의 변경 사항을 반영합니다. (Flush and refresh)"""
        await db.flush()
        await db.refresh(entity)
        return entity

    @logged_operation("delete_by_id")
    async def delete_by_id(self, db: AsyncSession, record_id: UUID) -> bool:
        """레코드를 영구 삭제합니다.

        Hard-delete a record by its UUID.

        Returns:
            bool: 삭제 성공 여부, 없으면 False (False when the record does not exist)
        """
        db_obj: ModelType | None = await self.find_by_id(db, record_id)
        if db_obj is None:
            return False

        await db.delete(db_obj)
        await db.flush()
        return True

    @logged_operation("soft_delete_by_id")
    async def soft_delete_by_id(self, db: AsyncSession, record_id: UUID) -> ModelType:
        """소프트 삭제. 이미 삭제된 레코드면 ValueError. (Soft delete)"""
        db_obj: ModelType = await self.find_by_id_or_fail(db, record_id)
        db_obj.soft_delete()
        return await self.save(db, db_obj)

    @logged_operation("restore_by_id")
    async def restore_by_id(self, db: AsyncSession, record_id: UUID) -> ModelType:
        """소프트 삭제 복구. 삭제되지 않은 레코드면 ValueError. (Restore)"""
        db_obj: ModelType = await self.find_by_id_or_fail(db, record_id)
        db_obj.restore()
        return await self.save(db, db_obj)

    # ------------------------------------------------------------------
    # 일괄 처리 — Batch processing
    # ------------------------------------------------------------------

    @logged_operation("process_in_chunks")
    async def process_in_chunks(
        self,
        db: AsyncSession,
        chunk_size: int,
        processor: Callable[[list[ModelType]], Awaitable[None]],
    ) -> int:
        """테이블을 ID 순서로 청크 단위 처리합니다.

        Walk the whole table ordered by id in chunks of ``chunk_size`` and
        hand each chunk to ``processor``.

        Returns:
            int: 처리된 레코드 수 (Number of processed records)

        Raises:
            ValueError: chunk_size가 0 이하 (chunk_size must be positive)
        """
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")

        processed: int = 0
        offset: int = 0
        while True:
            result = await db.execute(
                select(self.model).order_by(self.model.id).offset(offset).limit(chunk_size)
            )
            chunk: list[ModelType] = list(result.scalars().all())
            if not chunk:
                break
            await processor(chunk)
            processed += len(chunk)
            offset += chunk_size
            if len(chunk) < chunk_size:
                break
        return processed

    async def flush(self, db: AsyncSession) -> None:
        await db.flush()
