"""회원 레포지토리 — 회원 조회, 검색 및 역할 필터 쿼리.

User Repository — Member lookups, ranked search and role-filtered queries.
Extends BaseRepository with member-specific database operations.
"""

from typing import Sequence

from sqlalchemy import Select, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import ADMIN_ROLE_NAME, Role, User
from app.repositories.base import BaseRepository, logged_operation
from app.utils.pagination import paginate

# 회원 목록 상태 필터 — Status filter values for the member list
USER_STATUSES: tuple[str, ...] = ("active", "deleted", "all")


class UserRepository(BaseRepository[User]):
    """회원 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    @logged_operation("find_by_email")
    async def find_by_email(self, db: AsyncSession, email: str) -> User | None:
        """이메일로 회원을 조회합니다 (대소문자 무시).

        Retrieve a member by email, case-insensitively.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 이메일 주소 (Email address)

        Returns:
            User | None: 회원 또는 None (Member or None)
        """
        result = await db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    @logged_operation("find_by_google_id")
    async def find_by_google_id(self, db: AsyncSession, google_id: str) -> User | None:
        result = await db.execute(select(User).where(User.google_id == google_id))
        return result.scalar_one_or_none()

    @logged_operation("find_by_microsoft_id")
    async def find_by_microsoft_id(self, db: AsyncSession, microsoft_id: str) -> User | None:
        result = await db.execute(select(User).where(User.microsoft_id == microsoft_id))
        return result.scalar_one_or_none()

    @logged_operation("find_active_admins")
    async def find_active_admins(self, db: AsyncSession) -> list[User]:
        """ADMIN 역할을 가진 활성 회원 목록. (Active members holding ADMIN)"""
        result = await db.execute(
            select(User)
            .join(User.roles)
            .where(
                User.deleted_at.is_(None),
                func.upper(Role.name) == ADMIN_ROLE_NAME,
            )
            .order_by(User.name)
        )
        return list(result.scalars().unique().all())

    @logged_operation("find_members")
    async def find_members(self, db: AsyncSession, of_mg: bool) -> list[User]:
        """정회원/후원회원 구분으로 활성 회원을 조회합니다.

        Active members filtered by the regular-member flag.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            of_mg: True면 정회원, False면 후원회원 (True = regular, False = supporting)
        """
        result = await db.execute(
            select(User)
            .where(User.deleted_at.is_(None), User.of_mg.is_(of_mg))
            .order_by(User.name)
        )
        return list(result.scalars().all())

    def _status_query(self, status: str) -> Select:
        query: Select = select(User)
        if status == "active":
            query = query.where(User.deleted_at.is_(None))
        elif status == "deleted":
            query = query.where(User.deleted_at.is_not(None))
        return query

    @logged_operation("search_page")
    async def search_page(
        self,
        db: AsyncSession,
        page: int,
        size: int,
        search: str | None = None,
        status: str = "active",
    ) -> tuple[Sequence[User], int]:
        """회원 목록을 검색어와 상태로 페이지 조회합니다.

        Page through members filtered by status and an optional search term.
        Matches on name, email and phone are ranked: exact match first, then
        prefix, then substring; ties are ordered by name.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            page: 페이지 번호, 0부터 시작 (0-based page)
            size: 페이지 크기 (Page size)
            search: 검색어, 비어 있으면 전체 (Search term, optional)
            status: active | deleted | all

        Returns:
            tuple[Sequence[User], int]: (회원 목록, 전체 개수)
        """
        query: Select = self._status_query(status)

        term: str = (search or "").strip().lower()
        if not term:
            return await paginate(db, query.order_by(User.name), page, size)

        columns = (func.lower(User.name), func.lower(User.email), func.lower(func.coalesce(User.phone, "")))
        # LIKE wildcards in the term are matched literally
        query = query.where(or_(*(column.contains(term, autoescape=True) for column in columns)))
        rank = case(
            (or_(*(column == term for column in columns)), 1),
            (or_(*(column.startswith(term, autoescape=True) for column in columns)), 2),
            else_=3,
        )
        return await paginate(db, query.order_by(rank, User.name), page, size)

    @logged_operation("find_active_with_roles")
    async def find_active_with_roles(self, db: AsyncSession) -> list[User]:
        """역할이 함께 로드된 활성 회원 목록. (Active members, roles eagerly loaded)"""
        result = await db.execute(
            select(User).where(User.deleted_at.is_(None)).order_by(User.name)
        )
        return list(result.scalars().all())

    @logged_operation("status_page")
    async def status_page(
        self,
        db: AsyncSession,
        page: int,
        size: int,
        status: str = "active",
    ) -> tuple[Sequence[User], int]:
        return await paginate(db, self._status_query(status).order_by(User.name), page, size)

    @logged_operation("find_by_status")
    async def find_by_status(self, db: AsyncSession, status: str) -> list[User]:
        result = await db.execute(self._status_query(status).order_by(User.name))
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
