"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite (aiosqlite) database, session and
httpx client fixtures. Every test gets a fresh schema. Outgoing SMTP is
replaced with an AsyncMock and the login lockout registry is cleared.
"""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.models.user import ADMIN_ROLE_NAME, Role, User
from app.utils.jwt import create_access_token
from app.utils.login_attempts import login_attempts
from app.utils.password import hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite://"

# 비밀번호 정책을 통과하는 테스트 비밀번호 (Passwords that satisfy the policy)
ADMIN_PASSWORD = "Bunker#Zm9x"
MEMBER_PASSWORD = "Museum!Kq7w"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트마다 새 인메모리 스키마를 생성합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 외부 연동 대체 — External collaborators
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def sent_mail(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    """SMTP 발송을 AsyncMock으로 대체합니다. 호출 인자로 발송 내용을 검사합니다."""
    mock = AsyncMock(return_value=None)
    monkeypatch.setattr("app.services.email_service.send_email", mock)
    return mock


@pytest.fixture(autouse=True)
def reset_login_attempts():
    login_attempts.clear()
    yield
    login_attempts.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def create_member(
    db: AsyncSession,
    name: str,
    email: str,
    password: str | None = MEMBER_PASSWORD,
    roles: list[Role] | None = None,
    **fields,
) -> User:
    """테스트 회원을 생성합니다."""
    user = User(
        name=name,
        email=email,
        password=hash_password(password) if password else None,
        roles=roles or [],
        **fields,
    )
    db.add(user)
    await db.flush()
    return user


@pytest_asyncio.fixture
async def admin_role(db: AsyncSession) -> Role:
    role = Role(name=ADMIN_ROLE_NAME)
    db.add(role)
    await db.flush()
    return role


@pytest_asyncio.fixture
async def member_role(db: AsyncSession) -> Role:
    role = Role(name="MEMBER")
    db.add(role)
    await db.flush()
    return role


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession, admin_role: Role) -> User:
    """관리자 회원을 생성합니다."""
    return await create_member(
        db, "Anna Admin", "admin@bunkermuseum.com", ADMIN_PASSWORD, roles=[admin_role], of_mg=True
    )


@pytest_asyncio.fixture
async def member_user(db: AsyncSession, member_role: Role) -> User:
    """일반 회원(정회원)을 생성합니다."""
    return await create_member(
        db,
        "Max Mustermann",
        "max@example.com",
        roles=[member_role],
        of_mg=True,
        phone="+49 30 123456",
        city="Berlin",
        country="Deutschland",
    )


@pytest_asyncio.fixture
async def supporting_user(db: AsyncSession) -> User:
    """후원 회원(fördernd)을 생성합니다."""
    return await create_member(db, "Erika Muster", "erika@example.com", of_mg=False)


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "email": user.email})


@pytest.fixture
def admin_token(admin_user: User) -> str:
    return make_token(admin_user)


@pytest.fixture
def member_token(member_user: User) -> str:
    return make_token(member_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
