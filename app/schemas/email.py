"""이메일 관련 Pydantic 요청/응답 스키마 정의.

Email-related Pydantic request/response schema definitions.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class EmailSendRequest(BaseModel):
    """이메일 발송 요청 스키마.

    Email send request. Exactly one of ``user_id`` or ``custom_email`` must
    be given.

    Attributes:
        user_id: 수신 회원 UUID (Recipient member)
        custom_email: 직접 입력한 수신 주소 (Free recipient address)
        subject: 제목 (Subject)
        content: 본문 (Body)
    """

    user_id: UUID | None = None
    custom_email: str | None = None
    subject: str
    content: str


class EmailResponse(BaseModel):
    """발송 이메일 응답 스키마."""

    id: str
    from_address: str
    to_address: str
    subject: str
    content: str
    user_id: str | None = None  # 발신 회원, 시스템 메일이면 None (Sender, None for system mail)
    user_name: str | None = None
    is_system_email: bool
    created_at: datetime
    deleted_at: datetime | None = None


class RecipientResponse(BaseModel):
    """수신자 선택 목록 항목. (Recipient picker entry)"""

    id: str
    name: str
    email: str


class EmailStatsResponse(BaseModel):
    """이메일 통계 응답. (Email counters)"""

    total: int
    system_emails: int
    user_emails: int
