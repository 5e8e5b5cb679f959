"""내보내기 서비스 — 회원/예약/이메일 데이터를 xlsx, pdf, xml, json으로 변환.

Export Service — Renders members, bookings and emails as Excel, PDF, XML
or JSON downloads. Each category defines its columns once; the four
renderers turn those rows into file bytes sequentially.
"""

import json
import xml.etree.ElementTree as ET
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from io import BytesIO
from typing import Any
from uuid import UUID

from loguru import logger
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import Booking
from app.models.email import Email
from app.models.user import User
from app.repositories.booking_repository import booking_repository
from app.repositories.email_repository import email_repository
from app.repositories.user_repository import user_repository
from app.services.booking_service import booking_service
from app.services.email_service import email_service
from app.services.user_service import user_service
from app.utils.exceptions import BadRequestError

EXPORT_FORMATS: tuple[str, ...] = ("xlsx", "pdf", "xml", "json")
USER_EXPORT_TYPES: tuple[str, ...] = ("all", "ordentlich", "foerdernd", "ausgetreten")
EMAIL_EXPORT_TYPES: tuple[str, ...] = ("all", "system", "user")

CONTENT_TYPES: dict[str, str] = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
    "xml": "application/xml",
    "json": "application/json",
}
DEFAULT_CONTENT_TYPE: str = "application/octet-stream"

# 엑셀 헤더 스타일 — Excel header style
HEADER_COLOR: str = "2D3436"
HEADER_FONT: Font = Font(bold=True, color="FFFFFF", size=11)
HEADER_FILL: PatternFill = PatternFill(start_color=HEADER_COLOR, end_color=HEADER_COLOR, fill_type="solid")


def truncate(value: Any, max_length: int) -> str:
    """긴 문자열을 "..."로 줄입니다. None은 빈 문자열.

    Shorten ``value`` to ``max_length`` characters, ending in "..." when
    it was cut. None becomes "".
    """
    if value is None:
        return ""
    text: str = str(value)
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def content_type_for(fmt: str) -> str:
    return CONTENT_TYPES.get(fmt.lower(), DEFAULT_CONTENT_TYPE)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def _today() -> str:
    return date.today().isoformat()


@dataclass(frozen=True)
class ExportResult:
    """내보내기 결과 파일. (Rendered export file)"""

    content: bytes
    filename: str
    content_type: str


@dataclass(frozen=True)
class ExportLayout:
    """카테고리별 열 정의.

    Column definitions of one export category.

    Attributes:
        sheet_title: 엑셀 시트 이름 (Excel sheet name)
        excel_headers / excel_row: 엑셀 열 (Excel columns)
        column_widths: 엑셀 열 너비 (Excel column widths)
        pdf_title: PDF 제목 (PDF heading)
        pdf_headers / pdf_row / pdf_widths: PDF 표 열 (PDF table columns, widths in mm)
        xml_root / xml_item / xml_fields: XML 요소 구조 (XML element layout)
        json_item: JSON 직렬화 (JSON object per record)
    """

    sheet_title: str
    excel_headers: list[str]
    excel_row: Callable[[Any], list[str]]
    column_widths: list[int]
    pdf_title: str
    pdf_headers: list[str]
    pdf_row: Callable[[Any], list[str]]
    pdf_widths: list[float]
    xml_root: str
    xml_item: str
    xml_fields: Callable[[Any], list[tuple[str, Any]]]
    json_item: Callable[[Any], dict[str, Any]]


USER_LAYOUT: ExportLayout = ExportLayout(
    sheet_title="Users",
    excel_headers=["ID", "Name", "Email", "Email Verified", "Phone", "City", "Country", "Created At"],
    excel_row=lambda u: [
        _text(u.id),
        _text(u.name),
        _text(u.email),
        "Yes" if u.email_verified else "No",
        _text(u.phone),
        _text(u.city),
        _text(u.country),
        _text(u.created_at),
    ],
    column_widths=[38, 25, 32, 15, 18, 18, 18, 28],
    pdf_title="User Export",
    pdf_headers=["Name", "Email", "Phone", "City"],
    pdf_row=lambda u: [
        truncate(u.name, 20),
        truncate(u.email, 30),
        truncate(u.phone, 15),
        truncate(u.city, 15),
    ],
    pdf_widths=[45, 65, 35, 35],
    xml_root="users",
    xml_item="user",
    xml_fields=lambda u: [
        ("id", u.id),
        ("name", u.name),
        ("email", u.email),
        ("emailVerified", "true" if u.email_verified else "false"),
        ("phone", u.phone),
        ("city", u.city),
        ("country", u.country),
        ("createdAt", u.created_at),
    ],
    json_item=lambda u: user_service.to_response(u).model_dump(mode="json"),
)

BOOKING_LAYOUT: ExportLayout = ExportLayout(
    sheet_title="Bookings",
    excel_headers=["ID", "Code", "MG", "Purpose", "Amount", "Received At", "Status"],
    excel_row=lambda b: [
        _text(b.id),
        _text(b.code),
        _text(b.of_mg),
        _text(b.expected_purpose),
        _text(b.expected_amount),
        _text(b.received_at),
        "Assigned" if b.is_assigned else "Open",
    ],
    column_widths=[38, 15, 25, 40, 12, 28, 12],
    pdf_title="Booking Export",
    pdf_headers=["Code", "MG", "Purpose", "Amount"],
    pdf_row=lambda b: [
        truncate(b.code, 15),
        truncate(b.of_mg, 15),
        truncate(b.expected_purpose, 35),
        _text(b.expected_amount),
    ],
    pdf_widths=[30, 35, 85, 30],
    xml_root="bookings",
    xml_item="booking",
    xml_fields=lambda b: [
        ("id", b.id),
        ("code", b.code),
        ("ofMg", b.of_mg),
        ("expectedPurpose", b.expected_purpose),
        ("expectedAmount", b.expected_amount),
        ("receivedAt", b.received_at),
        ("actualPurpose", b.actual_purpose),
        ("actualAmount", b.actual_amount),
        ("userId", b.user_id),
        ("status", "Assigned" if b.is_assigned else "Open"),
    ],
    json_item=lambda b: booking_service.to_response(b).model_dump(mode="json"),
)

EMAIL_LAYOUT: ExportLayout = ExportLayout(
    sheet_title="Emails",
    excel_headers=["ID", "Subject", "Recipient", "Sent At", "Status"],
    excel_row=lambda e: [
        _text(e.id),
        _text(e.subject),
        _text(e.to_address),
        _text(e.created_at),
        "Sent" if e.deleted_at is None else "Deleted",
    ],
    column_widths=[38, 45, 32, 28, 12],
    pdf_title="Email Export",
    pdf_headers=["Subject", "Recipient", "Sent At", "Status"],
    pdf_row=lambda e: [
        truncate(e.subject, 35),
        truncate(e.to_address, 25),
        e.created_at.date().isoformat() if e.created_at else "",
        "Sent" if e.deleted_at is None else "Deleted",
    ],
    pdf_widths=[80, 55, 25, 20],
    xml_root="emails",
    xml_item="email",
    xml_fields=lambda e: [
        ("id", e.id),
        ("fromAddress", e.from_address),
        ("toAddress", e.to_address),
        ("subject", e.subject),
        ("createdAt", e.created_at),
        ("systemEmail", "true" if e.is_system_email else "false"),
        ("status", "Sent" if e.deleted_at is None else "Deleted"),
    ],
    json_item=lambda e: email_service.to_response(e).model_dump(mode="json"),
)


class ExportService:
    """데이터 내보내기 서비스.

    Service rendering export downloads for the admin dashboard.
    """

    # ------------------------------------------------------------------
    # 렌더러 — Renderers
    # ------------------------------------------------------------------

    def _to_excel(self, layout: ExportLayout, records: Sequence[Any]) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = layout.sheet_title

        for col_idx, header in enumerate(layout.excel_headers, 1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            cell.alignment = Alignment(horizontal="center")

        for record in records:
            ws.append(layout.excel_row(record))

        for i, w in enumerate(layout.column_widths, 1):
            ws.column_dimensions[ws.cell(row=1, column=i).column_letter].width = w

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    def _to_pdf(self, layout: ExportLayout, records: Sequence[Any]) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=A4, title=layout.pdf_title)
        styles = getSampleStyleSheet()

        rows: list[list[str]] = [layout.pdf_headers] + [layout.pdf_row(r) for r in records]
        table = Table(rows, colWidths=[w * mm for w in layout.pdf_widths], repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(f"#{HEADER_COLOR}")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 10),
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F5F6FA")]),
                    ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )

        story = [Paragraph(layout.pdf_title, styles["Title"]), Spacer(1, 6 * mm), table]
        doc.build(story)
        return buffer.getvalue()

    def _to_xml(self, layout: ExportLayout, records: Sequence[Any]) -> bytes:
        root = ET.Element(layout.xml_root)
        for record in records:
            item = ET.SubElement(root, layout.xml_item)
            for name, value in layout.xml_fields(record):
                ET.SubElement(item, name).text = _text(value)
        return ET.tostring(root, encoding="utf-8", xml_declaration=True)

    def _to_json(self, layout: ExportLayout, records: Sequence[Any]) -> bytes:
        payload: list[dict[str, Any]] = [layout.json_item(r) for r in records]
        return json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")

    def _normalize_format(self, fmt: str) -> str:
        normalized: str = (fmt or "").strip().lower()
        if normalized not in EXPORT_FORMATS:
            raise BadRequestError(f"Unsupported export format: {fmt}")
        return normalized

    def render(self, layout: ExportLayout, records: Sequence[Any], fmt: str) -> bytes:
        """레코드 목록을 지정 형식의 파일 내용으로 변환합니다.

        Raises:
            BadRequestError: 지원하지 않는 형식 (Unsupported format)
        """
        renderers: dict[str, Callable[[ExportLayout, Sequence[Any]], bytes]] = {
            "xlsx": self._to_excel,
            "pdf": self._to_pdf,
            "xml": self._to_xml,
            "json": self._to_json,
        }
        return renderers[self._normalize_format(fmt)](layout, records)

    def _result(self, layout: ExportLayout, records: Sequence[Any], fmt: str, filename_stem: str) -> ExportResult:
        normalized: str = self._normalize_format(fmt)
        content: bytes = self.render(layout, records, normalized)
        filename: str = f"{filename_stem}_{_today()}.{normalized}"
        logger.info(f"Export generated: {filename} ({len(records)} records, {len(content)} bytes)")
        return ExportResult(content=content, filename=filename, content_type=content_type_for(normalized))

    # ------------------------------------------------------------------
    # 카테고리 — Categories
    # ------------------------------------------------------------------

    async def export_users(self, db: AsyncSession, fmt: str, user_type: str = "all") -> ExportResult:
        """회원 목록을 내보냅니다.

        Export members. Types: all, ordentlich (active regular members),
        foerdernd (active supporting members), ausgetreten (deleted members).

        Raises:
            BadRequestError: 지원하지 않는 형식 또는 유형 (Unsupported format or type)
        """
        self._normalize_format(fmt)
        kind: str = (user_type or "all").strip().lower()
        if kind == "all":
            users: list[User] = await user_repository.find_all(db, order_by=User.name)
        elif kind == "ordentlich":
            users = await user_repository.find_members(db, True)
        elif kind == "foerdernd":
            users = await user_repository.find_members(db, False)
        elif kind == "ausgetreten":
            users = await user_repository.find_by_status(db, "deleted")
        else:
            raise BadRequestError(f"Unsupported user type: {user_type}")
        return self._result(USER_LAYOUT, users, fmt, f"users_{kind}")

    async def export_bookings(
        self,
        db: AsyncSession,
        fmt: str,
        booking_type: str = "all",
        start: date | None = None,
        end: date | None = None,
    ) -> ExportResult:
        """예약 목록을 유형과 기간으로 필터링하여 내보냅니다.

        Export bookings. Types: all, assigned, open, received, pending. The
        optional inclusive date range applies to the received date, or the
        creation date for bookings not yet received.
        """
        self._normalize_format(fmt)
        kind: str = (booking_type or "all").strip().lower()
        try:
            bookings: list[Booking] = await booking_repository.find_filtered(db, kind, start, end)
        except ValueError as e:
            raise BadRequestError(str(e))
        return self._result(BOOKING_LAYOUT, bookings, fmt, f"bookings_{kind}")

    async def export_emails(self, db: AsyncSession, fmt: str, email_type: str = "all") -> ExportResult:
        """이메일 기록을 내보냅니다. 유형: all, system, user."""
        self._normalize_format(fmt)
        kind: str = (email_type or "all").strip().lower()
        if kind not in EMAIL_EXPORT_TYPES:
            raise BadRequestError(f"Unsupported email type: {email_type}")

        if kind == "system":
            emails: list[Email] = await email_repository.find_system_emails(db)
        else:
            emails = await email_repository.find_all(db, order_by=Email.created_at.desc())
            if kind == "user":
                emails = [e for e in emails if e.is_user_email]
        return self._result(EMAIL_LAYOUT, emails, fmt, f"emails_{kind}")

    async def export_user(self, db: AsyncSession, user_id: UUID, fmt: str) -> ExportResult:
        """단일 회원을 내보냅니다. (Single member export)"""
        self._normalize_format(fmt)
        user: User = await user_repository.find_by_id_or_fail(db, user_id)
        return self._result(USER_LAYOUT, [user], fmt, f"user_{str(user.id)[:8]}")

    async def export_booking(self, db: AsyncSession, booking_id: UUID, fmt: str) -> ExportResult:
        """단일 예약을 내보냅니다. (Single booking export)"""
        self._normalize_format(fmt)
        booking: Booking = await booking_service.get_active_booking(db, booking_id)
        return self._result(BOOKING_LAYOUT, [booking], fmt, f"booking_{str(booking.id)[:8]}")


# 싱글턴 인스턴스 — Singleton instance
export_service: ExportService = ExportService()
