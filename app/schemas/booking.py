"""예약(회비) 관련 Pydantic 요청/응답 스키마 정의.

Booking-related Pydantic request/response schema definitions.
Covers booking listings and bulk assignment of membership fees.
"""

import enum
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class MemberType(str, enum.Enum):
    """일괄 배정 대상 회원 구분.

    Member group targeted by a bulk booking assignment.
    """

    REGULAR_MEMBERS = "REGULAR_MEMBERS"
    SUPPORTING_MEMBERS = "SUPPORTING_MEMBERS"

    @property
    def display_name(self) -> str:
        if self is MemberType.REGULAR_MEMBERS:
            return "Ordentliche Mitglieder"
        return "Fördernde Mitglieder"

    @property
    def of_mg(self) -> bool:
        """대상 회원의 정회원 플래그. (Flag value of the targeted members)"""
        return self is MemberType.REGULAR_MEMBERS


class BookingResponse(BaseModel):
    """예약 응답 스키마.

    Booking response schema with the assigned member's name and email.
    """

    id: str
    expected_purpose: str | None = None
    expected_amount: Decimal | None = None
    received_at: datetime | None = None
    actual_purpose: str | None = None
    actual_amount: Decimal | None = None
    of_mg: str | None = None  # 회원 구분 표시 (Member type label)
    note: str | None = None
    account_statement_page: str | None = None
    code: str | None = None
    user_id: str | None = None
    user_name: str | None = None  # 배정 회원 이름 (Assigned member name)
    user_email: str | None = None
    created_at: datetime
    updated_at: datetime


class AssignBookingRequest(BaseModel):
    """회비 일괄 배정 요청 스키마.

    Bulk assignment request: one booking per member of the chosen group.

    Attributes:
        member_type: 대상 회원 구분 (Target member group)
        expected_amount: 예정 금액 (Expected amount, must be > 0)
        actual_amount: 실제 금액 (Actual amount, must be > 0)
        actual_purpose: 용도, 기본 "Mitgliedsbeitrag" (Purpose, max 200 chars)
    """

    member_type: MemberType
    expected_amount: Decimal
    actual_amount: Decimal
    actual_purpose: str | None = None


class AssignBookingResponse(BaseModel):
    """일괄 배정 결과."""

    assigned_count: int
    message: str
