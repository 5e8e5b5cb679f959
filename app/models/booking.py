"""예약(회비 납부) 모델.

Booking model — An expected and received payment, usually a yearly
membership fee, optionally assigned to a member.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.base import SoftDeleteMixin


class Booking(SoftDeleteMixin, Base):
    """예약 테이블.

    Booking table. ``user_id`` is NULL for bookings that are not yet matched
    to a member ("open"); deleting the member keeps the booking.

    Attributes:
        expected_purpose / expected_amount: 예정 용도와 금액 (Expected purpose and amount)
        received_at: 입금 일시 (When the payment was received)
        actual_purpose / actual_amount: 실제 용도와 금액 (Actual purpose and amount)
        of_mg: 회원 구분 표시 (Member type label, e.g. "Ordentliche Mitglieder")
        note: 메모 (Free text note)
        account_statement_page: 계좌 명세서 페이지 (Bank statement page reference)
        code: 예약 코드 (Booking code)
        user_id: 배정된 회원 FK (Assigned member, nullable)
    """

    __tablename__ = "bookings"

    expected_purpose: Mapped[str | None] = mapped_column(String(255), nullable=True)
    expected_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    received_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    actual_purpose: Mapped[str | None] = mapped_column(String(255), nullable=True)
    actual_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    of_mg: Mapped[str | None] = mapped_column(String(100), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    account_statement_page: Mapped[str | None] = mapped_column(String(50), nullable=True)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # 배정 회원 — Assigned member (SET NULL: 회원 삭제 시 예약 유지)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    user = relationship("User", lazy="selectin")

    @property
    def is_assigned(self) -> bool:
        return self.user_id is not None
