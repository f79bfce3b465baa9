"""테스트 인프라 — 임시 SQLite DB, 세션, 토큰 저장 워커, httpx 클라이언트 픽스처.

Test infrastructure — Temporary SQLite DB, session, refresh token writer,
and httpx client fixtures. Environment is set before the package is imported
because settings are validated at import time.
Schema is created before each test and dropped after it.
"""

import os
import tempfile
from collections.abc import AsyncGenerator

# ---------------------------------------------------------------------------
# 테스트 환경 변수 — 패키지 임포트 전에 설정
# ---------------------------------------------------------------------------
_TMP_DIR = tempfile.mkdtemp(prefix="tokenauth-test-")
os.environ["JWT_SECRET_KEY"] = "test-secret-key-0123456789abcdef-0123456789abcdef"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/tokenauth_test.db"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AXIOM_API_TOKEN"] = ""
os.environ["AXIOM_DATASET"] = ""

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from tokenauth.database import Base, async_session, engine  # noqa: E402
from tokenauth.main import app  # noqa: E402
from tokenauth.models import RefreshToken, User  # noqa: E402
from tokenauth.repositories.token_repository import refresh_token_repository  # noqa: E402
from tokenauth.services.refresh_token_store import RefreshTokenStore, refresh_token_store  # noqa: E402
from tokenauth.utils.password import hash_password  # noqa: E402

AUTH = "/api/v1/auth"


# ---------------------------------------------------------------------------
# Function-scoped: 스키마, 세션, 워커, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """테스트마다 스키마를 생성하고, 종료 시 삭제 후 엔진을 정리합니다."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(database) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def token_store(database) -> AsyncGenerator[RefreshTokenStore, None]:
    """앱이 사용하는 리프레시 토큰 저장 워커를 시작/종료합니다."""
    await refresh_token_store.start()
    yield refresh_token_store
    await refresh_token_store.stop()


@pytest_asyncio.fixture
async def client(token_store) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def alice(db: AsyncSession) -> User:
    """alice / secret123 사용자를 생성합니다."""
    user = User(login="alice", password_hash=hash_password("secret123"))
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def find_stored_token(token: str) -> RefreshToken | None:
    """새 세션으로 저장된 리프레시 토큰을 조회합니다."""
    async with async_session() as session:
        return await refresh_token_repository.get_by_token(session, token)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
