"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin-facing endpoints
into a single router. Every endpoint requires the ADMIN role.

Included routers:
    - users: 회원 관리 (Member management)
    - roles: 역할 관리 및 부여 (Roles and role grants)
    - bookings: 예약 조회 및 회비 배정 (Bookings and fee assignment)
    - emails: 메일 발송 및 기록 (Mail sending and log)
    - exports: 파일 내보내기 (File exports)
"""

from fastapi import APIRouter

from app.api.admin.users import router as users_router
from app.api.admin.roles import router as roles_router
from app.api.admin.bookings import router as bookings_router
from app.api.admin.emails import router as emails_router
from app.api.admin.exports import router as exports_router

admin_router: APIRouter = APIRouter()

admin_router.include_router(users_router, prefix="/users", tags=["Users"])
admin_router.include_router(roles_router, prefix="/roles", tags=["Roles"])
admin_router.include_router(bookings_router, prefix="/bookings", tags=["Bookings"])
admin_router.include_router(emails_router, prefix="/emails", tags=["Emails"])
admin_router.include_router(exports_router, prefix="/exports", tags=["Exports"])
