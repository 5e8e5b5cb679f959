"""예약 서비스 — 예약 조회 및 회비 일괄 배정 비즈니스 로직.

Booking Service — Booking listings and bulk assignment of membership fees.
"""

from decimal import Decimal
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import utcnow
from app.models.booking import Booking
from app.models.user import User
from app.repositories.booking_repository import booking_repository
from app.repositories.user_repository import user_repository
from app.schemas.booking import BookingResponse, MemberType
from app.services.base import BaseService
from app.utils.exceptions import BadRequestError, NotFoundError

DEFAULT_PURPOSE: str = "Mitgliedsbeitrag"
MAX_PURPOSE_LENGTH: int = 200


class BookingService(BaseService[Booking]):
    """예약 관련 비즈니스 로직을 처리하는 서비스."""

    def __init__(self) -> None:
        super().__init__(booking_repository)

    def to_response(self, booking: Booking) -> BookingResponse:
        """예약 모델을 응답 스키마로 변환합니다. 배정 회원 정보를 포함합니다."""
        user: User | None = booking.user
        return BookingResponse(
            id=str(booking.id),
            expected_purpose=booking.expected_purpose,
            expected_amount=booking.expected_amount,
            received_at=booking.received_at,
            actual_purpose=booking.actual_purpose,
            actual_amount=booking.actual_amount,
            of_mg=booking.of_mg,
            note=booking.note,
            account_statement_page=booking.account_statement_page,
            code=booking.code,
            user_id=str(booking.user_id) if booking.user_id else None,
            user_name=user.name if user is not None else None,
            user_email=user.email if user is not None else None,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )

    async def get_all_bookings(self, db: AsyncSession) -> list[BookingResponse]:
        """모든 활성 예약을 최신순으로 조회합니다."""
        bookings: list[Booking] = await booking_repository.find_all_with_users(db)
        return [self.to_response(b) for b in bookings]

    async def get_current_user_bookings(self, db: AsyncSession, user: User) -> list[BookingResponse]:
        """현재 회원에게 배정된 예약 목록."""
        bookings: list[Booking] = await booking_repository.find_by_user(db, user.id)
        return [self.to_response(b) for b in bookings]

    async def get_active_booking(self, db: AsyncSession, booking_id: UUID) -> Booking:
        """삭제되지 않은 예약을 조회합니다.

        Raises:
            NotFoundError: 없거나 소프트 삭제된 예약 (Missing or soft-deleted booking)
        """
        booking: Booking = await booking_repository.find_by_id_or_fail(db, booking_id)
        if booking.is_deleted:
            raise NotFoundError(f"Booking with ID {booking_id} not found")
        return booking

    async def get_booking(self, db: AsyncSession, booking_id: UUID) -> BookingResponse:
        return self.to_response(await self.get_active_booking(db, booking_id))

    async def assign_booking_to_users(
        self,
        db: AsyncSession,
        member_type: MemberType,
        expected_amount: Decimal,
        actual_amount: Decimal,
        actual_purpose: str | None = None,
    ) -> int:
        """회원 구분별로 회비 예약을 일괄 생성합니다.

        Create one booking per active member of the chosen group. Purposes
        read "{purpose} {year}, {member name}" and the booking is marked as
        received now.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            member_type: 대상 회원 구분 (Target member group)
            expected_amount: 예정 금액 (Expected amount, > 0)
            actual_amount: 실제 금액 (Actual amount, > 0)
            actual_purpose: 용도, 기본 "Mitgliedsbeitrag" (Purpose, max 200 chars)

        Returns:
            int: 생성된 예약 수, 대상이 없으면 0 (Number of bookings created)

        Raises:
            BadRequestError: 금액이 0 이하이거나 용도가 너무 길 때
                             (Non-positive amount or purpose too long)
        """
        if expected_amount is None or expected_amount <= 0:
            raise BadRequestError("Expected amount must be greater than 0")
        if actual_amount is None or actual_amount <= 0:
            raise BadRequestError("Actual amount must be greater than 0")

        purpose: str = (actual_purpose or "").strip() or DEFAULT_PURPOSE
        if len(purpose) > MAX_PURPOSE_LENGTH:
            raise BadRequestError(f"Purpose must not exceed {MAX_PURPOSE_LENGTH} characters")

        targets: list[User] = await user_repository.find_members(db, member_type.of_mg)
        if not targets:
            logger.info(f"No members found for {member_type.value}, nothing assigned")
            return 0

        now = utcnow()
        bookings: list[Booking] = []
        for user in targets:
            label: str = f"{purpose} {now.year}, {user.name}"
            bookings.append(
                Booking(
                    expected_purpose=label,
                    expected_amount=expected_amount,
                    actual_purpose=label,
                    actual_amount=actual_amount,
                    received_at=now,
                    of_mg=member_type.display_name,
                    user_id=user.id,
                )
            )

        await booking_repository.create_all(db, bookings)
        logger.info(f"Assigned {len(bookings)} bookings to {member_type.display_name}")
        return len(bookings)

    async def delete_booking(self, db: AsyncSession, booking_id: UUID) -> None:
        """예약을 소프트 삭제합니다."""
        await self.soft_delete(db, booking_id)


# 싱글턴 인스턴스 — Singleton instance
booking_service: BookingService = BookingService()
