"""관리자 내보내기 라우터 — xlsx/pdf/xml/json 파일 다운로드.

Admin Export Router — File downloads of members, bookings and emails.
"""

from datetime import date
from io import BytesIO
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.services.export_service import ExportResult, export_service

router: APIRouter = APIRouter()


def _download(result: ExportResult) -> StreamingResponse:
    """내보내기 결과를 첨부 파일 응답으로 변환합니다."""
    return StreamingResponse(
        BytesIO(result.content),
        media_type=result.content_type,
        headers={"Content-Disposition": f"attachment; filename={result.filename}"},
    )


@router.get("/users")
async def export_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    format: Annotated[str, Query(description="xlsx | pdf | xml | json")] = "xlsx",
    type: Annotated[str, Query(description="all | ordentlich | foerdernd | ausgetreten")] = "all",
) -> StreamingResponse:
    """회원 목록을 파일로 내보냅니다.

    Export members of the given type as a download.
    """
    return _download(await export_service.export_users(db, format, type))


@router.get("/bookings")
async def export_bookings(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    format: Annotated[str, Query(description="xlsx | pdf | xml | json")] = "xlsx",
    type: Annotated[str, Query(description="all | assigned | open | received | pending")] = "all",
    start: Annotated[date | None, Query(description="시작일 (포함)")] = None,
    end: Annotated[date | None, Query(description="종료일 (포함)")] = None,
) -> StreamingResponse:
    """예약 목록을 유형과 기간으로 필터링하여 내보냅니다."""
    return _download(await export_service.export_bookings(db, format, type, start, end))


@router.get("/emails")
async def export_emails(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    format: Annotated[str, Query(description="xlsx | pdf | xml | json")] = "xlsx",
    type: Annotated[str, Query(description="all | system | user")] = "all",
) -> StreamingResponse:
    return _download(await export_service.export_emails(db, format, type))


@router.get("/users/{user_id}")
async def export_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    format: Annotated[str, Query(description="xlsx | pdf | xml | json")] = "xlsx",
) -> StreamingResponse:
    """단일 회원을 파일로 내보냅니다."""
    return _download(await export_service.export_user(db, user_id, format))


@router.get("/bookings/{booking_id}")
async def export_booking(
    booking_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    format: Annotated[str, Query(description="xlsx | pdf | xml | json")] = "xlsx",
) -> StreamingResponse:
    """단일 예약을 파일로 내보냅니다."""
    return _download(await export_service.export_booking(db, booking_id, format))
