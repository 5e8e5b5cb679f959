"""앱 API 라우터 패키지 — 모든 회원용 엔드포인트 통합.

App API Router package — Aggregates all member-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - auth: 회원가입/로그인/토큰 (Registration, login, tokens)
    - account: 내 계정 관리 (Account self-service)
    - bookings: 내 예약 (My bookings)
    - uploads: 프로필 사진 (Profile pictures)
"""

from fastapi import APIRouter

from app.api.app.auth import router as auth_router
from app.api.app.account import router as account_router
from app.api.app.bookings import router as bookings_router
from app.api.app.uploads import router as uploads_router

app_router: APIRouter = APIRouter()

app_router.include_router(auth_router, prefix="/auth", tags=["App Auth"])
app_router.include_router(account_router, prefix="/account", tags=["App Account"])
# 내 예약: /my/bookings (My bookings)
app_router.include_router(bookings_router, prefix="/my/bookings", tags=["My Bookings"])
app_router.include_router(uploads_router, prefix="/upload", tags=["Uploads"])
