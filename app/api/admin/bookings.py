"""관리자 예약 라우터 — 예약 조회, 회비 일괄 배정, 삭제.

Admin Booking Router — Booking listing, bulk fee assignment and deletion.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.booking import AssignBookingRequest, AssignBookingResponse, BookingResponse
from app.services.booking_service import booking_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[BookingResponse])
async def list_bookings(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> list[BookingResponse]:
    """활성 예약 목록을 최신순으로 조회합니다."""
    return await booking_service.get_all_bookings(db)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> BookingResponse:
    return await booking_service.get_booking(db, booking_id)


@router.post("/assign", response_model=AssignBookingResponse)
async def assign_bookings(
    data: AssignBookingRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> AssignBookingResponse:
    """회원 구분별로 회비 예약을 일괄 생성합니다.

    Create one fee booking for every active member of the chosen group.

    Args:
        data: 대상 구분, 금액, 용도 (Member group, amounts and purpose)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 관리자 (Authenticated administrator)

    Returns:
        AssignBookingResponse: 생성 건수와 메시지 (Created count and message)
    """
    count: int = await booking_service.assign_booking_to_users(
        db,
        data.member_type,
        data.expected_amount,
        data.actual_amount,
        data.actual_purpose,
    )
    await db.commit()
    return AssignBookingResponse(
        assigned_count=count,
        message=f"{count} bookings assigned to {data.member_type.display_name}",
    )


@router.delete("/{booking_id}", status_code=204)
async def delete_booking(
    booking_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> None:
    """예약을 소프트 삭제합니다."""
    await booking_service.delete_booking(db, booking_id)
    await db.commit()
