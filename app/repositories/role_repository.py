"""역할 레포지토리 — 역할 조회 및 중복 검사 쿼리.

Role Repository — Lookup and duplicate-check queries for roles.
"""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import Role
from app.repositories.base import BaseRepository, logged_operation


class RoleRepository(BaseRepository[Role]):
    """역할 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the roles table.
    """

    def __init__(self) -> None:
        super().__init__(Role)

    @logged_operation("find_by_name")
    async def find_by_name(self, db: AsyncSession, name: str) -> Role | None:
        """이름으로 역할을 조회합니다 (대소문자 무시).

        Retrieve a role by name, case-insensitively.
        """
        result = await db.execute(
            select(Role).where(func.lower(Role.name) == name.strip().lower())
        )
        return result.scalar_one_or_none()

    @logged_operation("find_all_ordered")
    async def find_all_ordered(self, db: AsyncSession) -> list[Role]:
        """활성 역할을 이름순으로 조회합니다. (Active roles ordered by name)"""
        query: Select = select(Role).where(Role.deleted_at.is_(None)).order_by(Role.name)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def check_duplicate(
        self,
        db: AsyncSession,
        name: str,
        exclude_id: UUID | None = None,
    ) -> bool:
        """같은 이름의 역할이 존재하는지 확인합니다.

        Check whether another role already uses this name.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            name: 확인할 역할 이름 (Role name to check)
            exclude_id: 수정 시 제외할 역할 ID (Role to exclude when updating)

        Returns:
            bool: 중복 여부 (True when the name is taken)
        """
        existing: Role | None = await self.find_by_name(db, name)
        return existing is not None and existing.id != exclude_id


# 싱글턴 인스턴스 — Singleton instance
role_repository: RoleRepository = RoleRepository()
