"""
Tech News Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite database file (aiosqlite) with the
       full schema created from the ORM metadata, and a freshly built app
       whose `get_db_session` dependency is bound to that database.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine:        async engine on a temp SQLite file, schema created
    ├── session_factory:  async_sessionmaker bound to db_engine
    ├── db_session:       an AsyncSession for seeding and inspecting rows
    ├── app:              create_app() with get_db_session overridden
    ├── test_client:      HTTPX AsyncClient for API endpoint testing
    ├── signup:           helper that signs a user up through the API
    ├── mock_db_session:  AsyncMock session for service unit tests
    └── sample_user_data: request body for POST /api/users
"""

import os

# Override settings for testing BEFORE any technews imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["RATE_LIMIT_REQUESTS"] = "10000"

from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import technews.models  # noqa: F401  (registers every table on Base.metadata)
from technews.database import Base, build_engine, get_db_session
from technews.main import create_app


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """A fresh SQLite database per test, foreign keys enforced."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'technews_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    A session outside any request, for seeding and asserting on rows.

    Usage:
        async def test_hash(db_session):
            user = (await db_session.execute(select(User))).scalar_one()
    """
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(session_factory):
    """
    A new app per test, so rate-limit counters never carry over, with the
    request session bound to the per-test database.
    """
    application = create_app()

    async def _get_test_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = _get_test_db_session
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    The client keeps cookies between requests, so a signup or login
    authenticates every following request from the same client.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/posts")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_user_data():
    return {
        "username": "lernantino",
        "email": "lernantino@gmail.com",
        "password": "password1234",
    }


@pytest.fixture
def signup(test_client):
    """
    Returns a coroutine that signs a user up (and therefore logs the
    client in) and returns the created user's JSON.
    """

    async def _signup(username: str = "lernantino", email: str = "lernantino@gmail.com",
                      password: str = "password1234") -> dict:
        response = await test_client.post(
            "/api/users",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _signup


# ══════════════════════════════════════════════════════════════════════════
# Mock Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_unknown_email(mock_db_session):
            result = MagicMock()
            result.scalar_one_or_none.return_value = None
            mock_db_session.execute.return_value = result
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session
