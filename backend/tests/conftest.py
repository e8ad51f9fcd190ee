"""
TeenLife Hours Backend — Test Configuration (conftest.py)
===========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test that touches the database gets its own SQLite file
       (sqlite+aiosqlite) with the schema created from Base.metadata. API
       tests run a fresh app per test with get_db_session overridden to use
       that database.

Fixture Hierarchy:
    db_engine ─ session_factory ─┬─ db_session    (service tests)
                                 └─ test_client   (API tests)
    locking_session_factory       concurrent writers (BEGIN IMMEDIATE)
    auth_headers(user_id)         bearer header factory
    hour_entry_data               a valid create payload
"""

import os
import tempfile

# Settings are read at import time; point them at throwaway values first.
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="teenlife_test_"), "app.db")
)
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret-not-for-production-use-0123456789"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["VERIFY_RATE_LIMIT_REQUESTS"] = "1000"

from datetime import datetime, timezone
from typing import Callable, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from teenlife.auth.jwt import create_access_token
from teenlife.database import Base, enable_sqlite_savepoints, get_db_session
from teenlife.models.notification import Notification  # noqa: F401
from teenlife.models.volunteer_hour import VolunteerHour  # noqa: F401


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """A fresh SQLite database file with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'teenlife.db'}")
    enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def locking_session_factory(tmp_path):
    """
    Sessions for tests that run several writers at once with asyncio.gather.

    Each transaction starts with BEGIN IMMEDIATE, so SQLite queues concurrent
    writers on its busy timeout the way row locks queue them on PostgreSQL.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'concurrent.db'}")
    enable_sqlite_savepoints(engine, immediate=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    """
    A session for service-level tests.

    Tests call services directly and commit (or not) themselves, the way the
    request dependency would.
    """
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# API Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(session_factory):
    """A fresh application (fresh rate limiter state) bound to the test database."""
    from teenlife.main import create_app

    application = create_app()

    async def _test_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = _test_db_session
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app over ASGI (no server).

    Usage:
        async def test_total(test_client, auth_headers):
            response = await test_client.get("/api/volunteer/total", headers=auth_headers("u1"))
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    def _headers(user_id: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers


# ══════════════════════════════════════════════════════════════════════════
# Sample Data
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def hour_entry_data():
    """A valid POST /api/volunteer body (camelCase, as the mobile app sends it)."""
    return {
        "organization": "Food Bank",
        "description": "Sorted donations",
        "hours": 3,
        "date": "2025-01-15",
        "location": "Main St warehouse",
        "supervisorName": "Dana Reyes",
        "supervisorEmail": "dana@example.org",
    }


@pytest.fixture
def service_date():
    return datetime(2025, 1, 15, tzinfo=timezone.utc)
