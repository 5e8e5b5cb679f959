"""발송 이메일 기록 모델.

Email model — Record of every email sent by the system or by a member.
"""

import uuid

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.base import SoftDeleteMixin


class Email(SoftDeleteMixin, Base):
    """이메일 테이블.

    Sent email log. ``user_id`` points at the sending member; system mails
    (welcome links, admin notifications) have no user.

    Attributes:
        from_address: 발신 주소 (Sender address)
        to_address: 수신 주소 (Recipient address)
        subject: 제목 (Subject, up to 500 chars)
        content: 본문 HTML (Body)
        user_id: 발신 회원 FK (Sending member, NULL for system mail)
    """

    __tablename__ = "emails"

    from_address: Mapped[str] = mapped_column(String(255), nullable=False)
    to_address: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    user = relationship("User", lazy="selectin")

    @property
    def is_system_email(self) -> bool:
        return self.user_id is None

    @property
    def is_user_email(self) -> bool:
        return self.user_id is not None
