"""앱 예약 라우터 — 내 회비 예약 목록.

App Booking Router — The current member's bookings.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.booking import BookingResponse
from app.services.booking_service import booking_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[BookingResponse])
async def list_my_bookings(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[BookingResponse]:
    """나에게 배정된 예약 목록을 조회합니다."""
    return await booking_service.get_current_user_bookings(db, current_user)
