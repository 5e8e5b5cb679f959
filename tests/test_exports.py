"""관리자 내보내기 API 테스트 — xlsx/pdf/xml/json 다운로드."""

import json
import xml.etree.ElementTree as ET
from datetime import date, timedelta
from decimal import Decimal
from io import BytesIO

from httpx import AsyncClient
from openpyxl import load_workbook
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import utcnow
from app.models.booking import Booking
from app.models.email import Email
from app.models.user import User
from app.services.export_service import CONTENT_TYPES, content_type_for, truncate
from tests.conftest import auth_header

URL = "/api/v1/admin/exports"


async def _booking(db: AsyncSession, user: User | None = None, **fields) -> Booking:
    booking = Booking(user_id=user.id if user is not None else None, **fields)
    db.add(booking)
    await db.flush()
    await db.refresh(booking)
    return booking


class TestTruncate:
    """문자열 줄이기 테스트."""

    def test_short_value_unchanged(self):
        assert truncate("Berlin", 15) == "Berlin"

    def test_long_value_ends_with_ellipsis(self):
        result = truncate("Mitgliedsbeitrag 2026, Max Mustermann", 20)
        assert len(result) == 20
        assert result.endswith("...")

    def test_none_is_empty(self):
        assert truncate(None, 10) == ""

    def test_content_type_fallback(self):
        assert content_type_for("PDF") == "application/pdf"
        assert content_type_for("csv") == "application/octet-stream"


class TestUserExport:
    """회원 내보내기 테스트."""

    async def test_xlsx(self, client: AsyncClient, admin_token, member_user: User):
        res = await client.get(f"{URL}/users", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.headers["content-type"] == CONTENT_TYPES["xlsx"]
        assert (
            res.headers["content-disposition"]
            == f"attachment; filename=users_all_{date.today().isoformat()}.xlsx"
        )

        ws = load_workbook(BytesIO(res.content)).active
        assert ws.title == "Users"
        headers = [c.value for c in ws[1]]
        assert headers == ["ID", "Name", "Email", "Email Verified", "Phone", "City", "Country", "Created At"]
        names = [row[1] for row in ws.iter_rows(min_row=2, values_only=True)]
        assert names == ["Anna Admin", "Max Mustermann"]

    async def test_pdf(self, client: AsyncClient, admin_token, member_user: User):
        res = await client.get(f"{URL}/users", params={"format": "pdf"}, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.headers["content-type"] == "application/pdf"
        assert res.content.startswith(b"%PDF")

    async def test_xml(self, client: AsyncClient, admin_token, member_user: User):
        res = await client.get(f"{URL}/users", params={"format": "XML"}, headers=auth_header(admin_token))
        assert res.status_code == 200
        root = ET.fromstring(res.content)
        assert root.tag == "users"
        emails = [u.findtext("email") for u in root.findall("user")]
        assert emails == ["admin@bunkermuseum.com", "max@example.com"]
        max_el = root.findall("user")[1]
        assert max_el.findtext("city") == "Berlin"
        assert max_el.findtext("emailVerified") == "false"

    async def test_json(self, client: AsyncClient, admin_token, member_user: User):
        res = await client.get(f"{URL}/users", params={"format": "json"}, headers=auth_header(admin_token))
        data = json.loads(res.content)
        assert [u["email"] for u in data] == ["admin@bunkermuseum.com", "max@example.com"]
        assert data[0]["roles"] == ["ADMIN"]

    async def test_user_types(
        self, client: AsyncClient, db: AsyncSession, admin_token, member_user: User, supporting_user: User
    ):
        former = User(name="Otto Ehemalig", email="otto@example.com", of_mg=True)
        db.add(former)
        await db.flush()
        former.soft_delete()
        await db.flush()

        async def names(kind: str) -> list[str]:
            res = await client.get(
                f"{URL}/users", params={"format": "json", "type": kind}, headers=auth_header(admin_token)
            )
            assert res.status_code == 200
            return [u["name"] for u in json.loads(res.content)]

        assert await names("ordentlich") == ["Anna Admin", "Max Mustermann"]
        assert await names("foerdernd") == ["Erika Muster"]
        assert await names("ausgetreten") == ["Otto Ehemalig"]
        assert len(await names("all")) == 4

    async def test_single_user(self, client: AsyncClient, admin_token, member_user: User):
        res = await client.get(f"{URL}/users/{member_user.id}", params={"format": "json"}, headers=auth_header(admin_token))
        assert res.status_code == 200
        filename = f"user_{str(member_user.id)[:8]}_{date.today().isoformat()}.json"
        assert res.headers["content-disposition"] == f"attachment; filename={filename}"
        assert [u["email"] for u in json.loads(res.content)] == ["max@example.com"]

    async def test_single_user_missing(self, client: AsyncClient, admin_token):
        res = await client.get(f"{URL}/users/00000000-0000-0000-0000-000000000000", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_unsupported_format(self, client: AsyncClient, admin_token):
        res = await client.get(f"{URL}/users", params={"format": "csv"}, headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "Unsupported export format: csv"

    async def test_unsupported_type(self, client: AsyncClient, admin_token):
        res = await client.get(f"{URL}/users", params={"type": "ehrenmitglied"}, headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "Unsupported user type: ehrenmitglied"

    async def test_member_forbidden(self, client: AsyncClient, member_token):
        res = await client.get(f"{URL}/users", headers=auth_header(member_token))
        assert res.status_code == 403


class TestBookingExport:
    """예약 내보내기 테스트."""

    async def test_types(self, client: AsyncClient, db: AsyncSession, admin_token, member_user: User):
        await _booking(db, member_user, code="A-1", received_at=utcnow(), expected_amount=Decimal("30.00"))
        await _booking(db, code="O-1")

        async def codes(kind: str) -> set[str]:
            res = await client.get(
                f"{URL}/bookings", params={"format": "json", "type": kind}, headers=auth_header(admin_token)
            )
            assert res.status_code == 200
            return {b["code"] for b in json.loads(res.content)}

        assert await codes("all") == {"A-1", "O-1"}
        assert await codes("assigned") == {"A-1"}
        assert await codes("open") == {"O-1"}
        assert await codes("received") == {"A-1"}
        assert await codes("pending") == {"O-1"}

    async def test_date_range(self, client: AsyncClient, db: AsyncSession, admin_token):
        await _booking(db, code="ALT", received_at=utcnow() - timedelta(days=400))
        await _booking(db, code="NEU", received_at=utcnow())

        today = utcnow().date()
        res = await client.get(
            f"{URL}/bookings",
            params={"format": "json", "start": (today - timedelta(days=1)).isoformat(), "end": today.isoformat()},
            headers=auth_header(admin_token),
        )
        assert [b["code"] for b in json.loads(res.content)] == ["NEU"]

    async def test_start_after_end(self, client: AsyncClient, admin_token):
        today = utcnow().date()
        res = await client.get(
            f"{URL}/bookings",
            params={"start": today.isoformat(), "end": (today - timedelta(days=1)).isoformat()},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 400

    async def test_unknown_type(self, client: AsyncClient, admin_token):
        res = await client.get(f"{URL}/bookings", params={"type": "storniert"}, headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_xlsx_status_column(self, client: AsyncClient, db: AsyncSession, admin_token, member_user: User):
        await _booking(db, member_user, code="A-1")
        res = await client.get(f"{URL}/bookings", headers=auth_header(admin_token))
        ws = load_workbook(BytesIO(res.content)).active
        assert [c.value for c in ws[1]][-1] == "Status"
        assert ws.cell(row=2, column=7).value == "Assigned"

    async def test_single_booking_pdf(self, client: AsyncClient, db: AsyncSession, admin_token):
        booking = await _booking(db, code="B-9", expected_purpose="Spende " * 20)
        res = await client.get(f"{URL}/bookings/{booking.id}", params={"format": "pdf"}, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.content.startswith(b"%PDF")
        assert f"booking_{str(booking.id)[:8]}_" in res.headers["content-disposition"]

    async def test_soft_deleted_booking_not_found(self, client: AsyncClient, db: AsyncSession, admin_token):
        booking = await _booking(db, code="C-3")
        booking.soft_delete()
        await db.flush()
        res = await client.get(f"{URL}/bookings/{booking.id}", headers=auth_header(admin_token))
        assert res.status_code == 404


class TestEmailExport:
    """이메일 기록 내보내기 테스트."""

    async def test_email_types(self, client: AsyncClient, db: AsyncSession, admin_token, admin_user: User):
        db.add_all([
            Email(from_address="noreply@bunkermuseum.com", to_address="a@example.com", subject="System", content="x"),
            Email(from_address=admin_user.email, to_address="b@example.com", subject="Rundbrief", content="x", user_id=admin_user.id),
        ])
        await db.flush()

        async def subjects(kind: str) -> set[str]:
            res = await client.get(
                f"{URL}/emails", params={"format": "xml", "type": kind}, headers=auth_header(admin_token)
            )
            assert res.status_code == 200
            root = ET.fromstring(res.content)
            return {e.findtext("subject") for e in root.findall("email")}

        assert await subjects("all") == {"System", "Rundbrief"}
        assert await subjects("system") == {"System"}
        assert await subjects("user") == {"Rundbrief"}

    async def test_unknown_email_type(self, client: AsyncClient, admin_token):
        res = await client.get(f"{URL}/emails", params={"type": "spam"}, headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "Unsupported email type: spam"
