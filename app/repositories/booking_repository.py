"""예약 레포지토리 — 예약 목록 및 내보내기 필터 쿼리.

Booking Repository — Booking listings and export filters.
"""

from datetime import date, datetime, time, timedelta, timezone
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import Booking
from app.repositories.base import BaseRepository, logged_operation

# 내보내기 예약 유형 — Booking export types
BOOKING_TYPES: tuple[str, ...] = ("all", "assigned", "open", "received", "pending")


def _day_start(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


class BookingRepository(BaseRepository[Booking]):
    """예약 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the bookings table.
    Soft-deleted bookings are excluded from every listing here.
    """

    def __init__(self) -> None:
        super().__init__(Booking)

    @logged_operation("find_all_with_users")
    async def find_all_with_users(self, db: AsyncSession) -> list[Booking]:
        """모든 활성 예약을 최신순으로 조회합니다 (회원 포함).

        All active bookings, newest first, with the assigned member loaded.
        """
        result = await db.execute(
            select(Booking)
            .where(Booking.deleted_at.is_(None))
            .order_by(Booking.created_at.desc())
        )
        return list(result.scalars().all())

    @logged_operation("find_by_user")
    async def find_by_user(self, db: AsyncSession, user_id: UUID) -> list[Booking]:
        """특정 회원에게 배정된 예약. (Bookings assigned to one member)"""
        result = await db.execute(
            select(Booking)
            .where(Booking.user_id == user_id, Booking.deleted_at.is_(None))
            .order_by(Booking.created_at.desc())
        )
        return list(result.scalars().all())

    @logged_operation("find_filtered")
    async def find_filtered(
        self,
        db: AsyncSession,
        booking_type: str = "all",
        start: date | None = None,
        end: date | None = None,
    ) -> list[Booking]:
        """유형과 기간으로 예약을 필터링합니다.

        Filter bookings by export type and an inclusive date range. The date
        range applies to ``received_at`` and falls back to ``created_at`` for
        bookings that were not received yet.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            booking_type: all | assigned | open | received | pending
            start: 시작일 포함 (Inclusive start date)
            end: 종료일 포함 (Inclusive end date)

        Returns:
            list[Booking]: 최신순 예약 목록 (Matching bookings, newest first)

        Raises:
            ValueError: 알 수 없는 유형 또는 start > end
        """
        if booking_type not in BOOKING_TYPES:
            raise ValueError(f"Unsupported booking type: {booking_type}")
        if start is not None and end is not None and start > end:
            raise ValueError("Start date must not be after end date")

        query: Select = select(Booking).where(Booking.deleted_at.is_(None))
        if booking_type == "assigned":
            query = query.where(Booking.user_id.is_not(None))
        elif booking_type == "open":
            query = query.where(Booking.user_id.is_(None))
        elif booking_type == "received":
            query = query.where(Booking.received_at.is_not(None))
        elif booking_type == "pending":
            query = query.where(Booking.received_at.is_(None))

        effective_date = func.coalesce(Booking.received_at, Booking.created_at)
        if start is not None:
            query = query.where(effective_date >= _day_start(start))
        if end is not None:
            query = query.where(effective_date < _day_start(end + timedelta(days=1)))

        result = await db.execute(query.order_by(Booking.created_at.desc()))
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
booking_repository: BookingRepository = BookingRepository()
