"""이메일 레포지토리 — 발송 이메일 기록 조회 및 통계.

Email Repository — Queries and counters over the sent-email log.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import as_utc
from app.models.email import Email
from app.repositories.base import BaseRepository, logged_operation


class EmailRepository(BaseRepository[Email]):
    """이메일 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the emails table.
    All listings are ordered newest first.
    """

    def __init__(self) -> None:
        super().__init__(Email)

    async def _newest_first(self, db: AsyncSession, query: Select) -> list[Email]:
        result = await db.execute(query.order_by(Email.created_at.desc()))
        return list(result.scalars().all())

    @logged_operation("find_by_user")
    async def find_by_user(self, db: AsyncSession, user_id: UUID) -> list[Email]:
        """회원이 보낸 이메일 목록. (Emails sent by one member)"""
        return await self._newest_first(db, select(Email).where(Email.user_id == user_id))

    @logged_operation("find_system_emails")
    async def find_system_emails(self, db: AsyncSession) -> list[Email]:
        """시스템 이메일 목록 (user_id IS NULL). (System emails)"""
        return await self._newest_first(db, select(Email).where(Email.user_id.is_(None)))

    @logged_operation("find_by_to_address")
    async def find_by_to_address(self, db: AsyncSession, to_address: str) -> list[Email]:
        return await self._newest_first(db, select(Email).where(Email.to_address == to_address))

    @logged_operation("find_by_from_address")
    async def find_by_from_address(self, db: AsyncSession, from_address: str) -> list[Email]:
        return await self._newest_first(db, select(Email).where(Email.from_address == from_address))

    @logged_operation("find_by_date_range")
    async def find_by_date_range(
        self,
        db: AsyncSession,
        start: datetime,
        end: datetime,
    ) -> list[Email]:
        """기간 내 발송된 이메일을 조회합니다 (양 끝 포함).

        Emails created between ``start`` and ``end``, both inclusive.

        Raises:
            ValueError: start가 end보다 늦은 경우 (start is after end)
        """
        start, end = as_utc(start), as_utc(end)
        if start > end:
            raise ValueError("Start date must be before or equal to end date")
        return await self._newest_first(
            db, select(Email).where(Email.created_at >= start, Email.created_at <= end)
        )

    @logged_operation("count_by_user")
    async def count_by_user(self, db: AsyncSession, user_id: UUID) -> int:
        return await self.count(db, {"user_id": user_id})

    @logged_operation("count_system_emails")
    async def count_system_emails(self, db: AsyncSession) -> int:
        result = await db.execute(
            select(func.count()).select_from(Email).where(Email.user_id.is_(None))
        )
        return result.scalar() or 0

    @logged_operation("search_by_user")
    async def search_by_user(self, db: AsyncSession, user_id: UUID, term: str) -> list[Email]:
        """회원 이메일을 제목/본문으로 검색합니다 (대소문자 무시).

        Search a member's emails by subject or content, case-insensitively.
        A blank term returns all of the member's emails.
        """
        query: Select = select(Email).where(Email.user_id == user_id)
        needle: str = (term or "").strip().lower()
        if needle:
            query = query.where(
                or_(
                    func.lower(Email.subject).contains(needle, autoescape=True),
                    func.lower(Email.content).contains(needle, autoescape=True),
                )
            )
        return await self._newest_first(db, query)


# 싱글턴 인스턴스 — Singleton instance
email_repository: EmailRepository = EmailRepository()
