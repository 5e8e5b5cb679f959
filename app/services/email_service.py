"""이메일 서비스 — 메일 발송 및 발송 기록 관리.

Email Service — Sends mail over SMTP and keeps the sent-email log.
A mail is persisted only after the SMTP relay accepted it; transport
failures surface as 503 and leave no record behind.
"""

from datetime import datetime
from uuid import UUID

import aiosmtplib
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.email import Email
from app.models.user import User
from app.repositories.email_repository import email_repository
from app.repositories.user_repository import user_repository
from app.schemas.common import PageResponse
from app.schemas.email import EmailResponse, EmailStatsResponse, RecipientResponse
from app.services.base import BaseService
from app.utils.email import send_email
from app.utils.exceptions import BadRequestError, ServiceUnavailableError

MAX_PAGE_SIZE: int = 100

RECIPIENT_REQUIRED_MESSAGE: str = (
    "Bitte wählen Sie entweder einen Benutzer oder geben Sie eine E-Mail-Adresse ein."
)


def _require(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise BadRequestError(f"{field} must not be null or blank")
    return value


class EmailService(BaseService[Email]):
    """이메일 관련 비즈니스 로직을 처리하는 서비스.

    Service handling email sending and the sent-email history.
    """

    def __init__(self) -> None:
        super().__init__(email_repository)

    def to_response(self, email: Email) -> EmailResponse:
        """이메일 모델을 응답 스키마로 변환합니다."""
        return EmailResponse(
            id=str(email.id),
            from_address=email.from_address,
            to_address=email.to_address,
            subject=email.subject,
            content=email.content,
            user_id=str(email.user_id) if email.user_id else None,
            user_name=email.user.name if email.user is not None else None,
            is_system_email=email.is_system_email,
            created_at=email.created_at,
            deleted_at=email.deleted_at,
        )

    async def _deliver_and_record(
        self,
        db: AsyncSession,
        from_address: str,
        to_address: str,
        subject: str,
        content: str,
        user: User | None,
        attachments: list[tuple[str, bytes, str]] | None = None,
        recorded_content: str | None = None,
    ) -> Email:
        try:
            await send_email(
                to=to_address,
                subject=subject,
                html=content,
                from_address=from_address,
                attachments=attachments,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_address}: {e}")
            raise ServiceUnavailableError("Failed to send email")

        email: Email = await email_repository.create(
            db,
            {
                "from_address": from_address,
                "to_address": to_address,
                "subject": subject,
                "content": recorded_content if recorded_content is not None else content,
                "user": user,
            },
        )
        logger.info(f"Email sent to {to_address}: {subject}")
        return email

    async def send_simple_email(
        self,
        db: AsyncSession,
        from_address: str,
        to_address: str,
        subject: str,
        content: str,
        user: User | None = None,
    ) -> Email:
        """메일을 발송하고 발송 기록을 저장합니다.

        Send one mail and persist it in the email log.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            from_address: 발신 주소 (Sender address)
            to_address: 수신 주소 (Recipient address)
            subject: 제목 (Subject)
            content: HTML 본문 (HTML body)
            user: 발신 회원, 시스템 메일이면 None (Sending member, None for system mail)

        Returns:
            Email: 저장된 발송 기록 (Persisted email record)

        Raises:
            BadRequestError: 빈 인자 (Blank argument)
            ServiceUnavailableError: SMTP 전송 실패 (SMTP transport failure)
        """
        _require(from_address, "From address")
        _require(to_address, "To address")
        _require(subject, "Subject")
        _require(content, "Content")
        return await self._deliver_and_record(db, from_address, to_address, subject, content, user)

    async def send_email_with_attachment(
        self,
        db: AsyncSession,
        from_address: str,
        to_address: str,
        subject: str,
        content: str,
        attachment_name: str,
        attachment_bytes: bytes,
        content_type: str = "application/octet-stream",
        user: User | None = None,
    ) -> Email:
        """첨부 파일과 함께 메일을 발송합니다.

        The stored content records the attachment name on an extra line.
        """
        _require(from_address, "From address")
        _require(to_address, "To address")
        _require(subject, "Subject")
        _require(content, "Content")
        _require(attachment_name, "Attachment name")
        if not attachment_bytes:
            raise BadRequestError("Attachment must not be empty")

        return await self._deliver_and_record(
            db,
            from_address,
            to_address,
            subject,
            content,
            user,
            attachments=[(attachment_name, attachment_bytes, content_type)],
            recorded_content=f"{content}\n[Attachment: {attachment_name}]",
        )

    async def send_email(
        self,
        db: AsyncSession,
        sender: User,
        subject: str,
        content: str,
        user_id: UUID | None = None,
        custom_email: str | None = None,
    ) -> EmailResponse:
        """관리자 화면에서 회원 또는 직접 입력한 주소로 메일을 보냅니다.

        Send a mail from the admin UI to either a member or a free address.
        The sender address is the current member's email.

        Raises:
            BadRequestError: 수신자를 둘 다 지정했거나 둘 다 없을 때
                             (Neither or both recipients given)
            NotFoundError: 수신 회원을 찾을 수 없을 때 (Recipient member not found)
        """
        has_custom: bool = custom_email is not None and bool(custom_email.strip())
        if (user_id is None) == (not has_custom):
            raise BadRequestError(RECIPIENT_REQUIRED_MESSAGE)

        if user_id is not None:
            recipient: User = await user_repository.find_by_id_or_fail(db, user_id)
            to_address: str = recipient.email
        else:
            to_address = custom_email.strip()

        email: Email = await self.send_simple_email(
            db, sender.email, to_address, subject, content, user=sender
        )
        return self.to_response(email)

    async def get_emails_page(self, db: AsyncSession, page: int = 0, size: int = 20) -> PageResponse[EmailResponse]:
        """발송 이메일 목록을 최신순으로 페이지 조회합니다."""
        if page < 0:
            raise BadRequestError("Page must not be negative")
        if not 1 <= size <= MAX_PAGE_SIZE:
            raise BadRequestError(f"Size must be between 1 and {MAX_PAGE_SIZE}")

        emails, total = await email_repository.find_page(db, page, size)
        return PageResponse[EmailResponse].build(
            [self.to_response(e) for e in emails], total, page, size
        )

    async def get_all_active_users(self, db: AsyncSession) -> list[RecipientResponse]:
        """수신자 선택용 활성 회원 목록."""
        users: list[User] = await user_repository.find_by_status(db, "active")
        return [RecipientResponse(id=str(u.id), name=u.name, email=u.email) for u in users]

    async def get_user_emails(self, db: AsyncSession, user_id: UUID) -> list[EmailResponse]:
        emails: list[Email] = await email_repository.find_by_user(db, user_id)
        return [self.to_response(e) for e in emails]

    async def get_system_emails(self, db: AsyncSession) -> list[EmailResponse]:
        emails: list[Email] = await email_repository.find_system_emails(db)
        return [self.to_response(e) for e in emails]

    async def search_user_emails(self, db: AsyncSession, user_id: UUID, term: str) -> list[EmailResponse]:
        emails: list[Email] = await email_repository.search_by_user(db, user_id, term)
        return [self.to_response(e) for e in emails]

    async def get_emails_between(
        self, db: AsyncSession, start: datetime, end: datetime
    ) -> list[EmailResponse]:
        """기간 내 이메일. start > end이면 400. (400 when start is after end)"""
        try:
            emails: list[Email] = await email_repository.find_by_date_range(db, start, end)
        except ValueError as e:
            raise BadRequestError(str(e))
        return [self.to_response(e) for e in emails]

    async def count_user_emails(self, db: AsyncSession, user_id: UUID) -> int:
        return await email_repository.count_by_user(db, user_id)

    async def count_system_emails(self, db: AsyncSession) -> int:
        return await email_repository.count_system_emails(db)

    async def get_stats(self, db: AsyncSession) -> EmailStatsResponse:
        """전체/시스템/회원 이메일 개수."""
        total: int = await email_repository.count(db)
        system: int = await email_repository.count_system_emails(db)
        return EmailStatsResponse(total=total, system_emails=system, user_emails=total - system)


# 싱글턴 인스턴스 — Singleton instance
email_service: EmailService = EmailService()
