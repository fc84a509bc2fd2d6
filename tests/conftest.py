"""Root test fixtures shared across all test types.

Every test that touches the database gets its own SQLite file, created from
the model metadata and installed as the application engine, so services and
the HTTP app share one database without any cleanup between tests.
"""

import os

# Set APP_ENV to testing before any app imports to disable rate limiting
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
# Cheap hashing keeps the suite fast; the parameters are not under test
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

from src.teamspace import models  # noqa: F401 - registers tables on the metadata
from src.teamspace.core.config import get_settings
from src.teamspace.core.db import create_engine_for_url, create_session_factory
from src.teamspace.core.db import engine as engine_module
from src.teamspace.main import create_app
from src.teamspace.models import Business, Role, User
from tests.helpers import create_business, create_user

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


@pytest.fixture
async def engine(tmp_path, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[AsyncEngine]:
    """Fresh SQLite database per test, installed as the app's engine."""
    test_engine = create_engine_for_url(f"sqlite+aiosqlite:///{tmp_path / 'teamspace.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    monkeypatch.setattr(engine_module, "_engine", test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Open one session per service call.

    A rollback expires everything loaded in its session, so tests never reuse
    a session across operations that may fail.
    """
    return create_session_factory(engine)


@pytest.fixture
async def super_admin(session_factory) -> User:
    return await create_user(session_factory, Role.SUPER_ADMIN, email="root@example.com")


@pytest.fixture
async def business(session_factory) -> Business:
    return await create_business(session_factory, name="Acme", max_admins=2, max_members=3)


@pytest.fixture
async def other_business(session_factory) -> Business:
    return await create_business(session_factory, name="Globex")


@pytest.fixture
async def admin(session_factory, business: Business) -> User:
    return await create_user(
        session_factory, Role.ADMIN, business, email="admin@example.com", full_name="Ada Admin"
    )


@pytest.fixture
async def member(session_factory, business: Business) -> User:
    return await create_user(session_factory, Role.MEMBER, business, email="member@example.com")


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """HTTP client against a fresh app bound to the test database."""
    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
