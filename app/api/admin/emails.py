"""관리자 이메일 라우터 — 메일 발송 및 발송 기록 조회.

Admin Email Router — Send mails from the dashboard and browse the
sent-mail log.
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.common import PageResponse
from app.schemas.email import EmailResponse, EmailSendRequest, EmailStatsResponse, RecipientResponse
from app.services.email_service import email_service

router: APIRouter = APIRouter()


@router.get("", response_model=PageResponse[EmailResponse])
async def list_emails(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    page: Annotated[int, Query(description="페이지 번호, 0부터 시작")] = 0,
    size: Annotated[int, Query(description="페이지 크기")] = 20,
) -> PageResponse[EmailResponse]:
    """발송 이메일을 최신순으로 페이지 조회합니다."""
    return await email_service.get_emails_page(db, page, size)


@router.post("", response_model=EmailResponse, status_code=201)
async def send_email(
    data: EmailSendRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> EmailResponse:
    """회원 또는 직접 입력한 주소로 메일을 보냅니다.

    Send a mail to a member (``user_id``) or a free address
    (``custom_email``); exactly one of them must be set.
    """
    result: EmailResponse = await email_service.send_email(
        db,
        current_user,
        data.subject,
        data.content,
        user_id=data.user_id,
        custom_email=data.custom_email,
    )
    await db.commit()
    return result


@router.get("/recipients", response_model=list[RecipientResponse])
async def list_recipients(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> list[RecipientResponse]:
    """수신자 선택용 활성 회원 목록."""
    return await email_service.get_all_active_users(db)


@router.get("/system", response_model=list[EmailResponse])
async def list_system_emails(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> list[EmailResponse]:
    return await email_service.get_system_emails(db)


@router.get("/users/{user_id}", response_model=list[EmailResponse])
async def list_user_emails(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> list[EmailResponse]:
    """특정 회원이 보낸 이메일 목록."""
    return await email_service.get_user_emails(db, user_id)


@router.get("/users/{user_id}/search", response_model=list[EmailResponse])
async def search_user_emails(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    term: Annotated[str, Query(description="제목/본문 검색어")] = "",
) -> list[EmailResponse]:
    """회원 이메일을 제목/본문으로 검색합니다. 빈 검색어는 전체 반환."""
    return await email_service.search_user_emails(db, user_id, term)


@router.get("/range", response_model=list[EmailResponse])
async def list_emails_between(
    start: datetime,
    end: datetime,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> list[EmailResponse]:
    """기간 내 발송된 이메일 목록.

    Mails created between ``start`` and ``end`` inclusive.
    """
    return await email_service.get_emails_between(db, start, end)


@router.get("/stats", response_model=EmailStatsResponse)
async def email_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> EmailStatsResponse:
    return await email_service.get_stats(db)
