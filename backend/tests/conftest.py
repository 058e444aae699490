"""
WeatherNotes — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment variables are set BEFORE any weathernotes import, so the
       settings singleton and the engine point at a throwaway SQLite file.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for pure unit tests
    ├── db_engine:       creates all tables on the SQLite file, drops them after
    ├── db_session:      real AsyncSession on that database
    ├── make_user:       inserts a user with a real bcrypt digest
    ├── test_client:     HTTPX AsyncClient wired to the app (own cookie jar)
    └── other_client:    a second browser, for cross-user tests
"""

import os
import tempfile

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

_TEST_DIR = tempfile.mkdtemp(prefix="weathernotes_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["WEATHER_API_KEY"] = "test-key-not-real"
os.environ["BCRYPT_ROUNDS"] = "4"  # bcrypt minimum; keeps the suite fast
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from weathernotes.database import Base, async_session_factory, engine  # noqa: E402
from weathernotes.models.note import Note  # noqa: E402,F401
from weathernotes.models.user import User  # noqa: E402
from weathernotes.services.passwords import hash_password  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine():
    """Fresh schema for each test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    async with async_session_factory() as session:
        yield session


@pytest.fixture
def make_user(db_session):
    """
    Factory inserting a user directly, bypassing AuthService.

    Usage:
        user = await make_user("a@x.com", "pw", "Paris")
    """
    async def _make_user(email: str, password: str = "pw", city: str = "Paris") -> User:
        user = User(email=email, password=await hash_password(password), city=city)
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Redirects are not followed, so tests assert on 303 + Location directly.
    The client keeps the session cookie between requests like a browser.
    """
    from weathernotes.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def other_client(db_engine):
    from weathernotes.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
