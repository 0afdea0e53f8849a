"""
CatVote Backend: Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── store:           Store on a throwaway SQLite file, tables created
    │   ├── db_session:  Session on that store for service-level tests
    │   └── app:         FastAPI app bound to that store
    │       └── test_client: HTTPX AsyncClient over ASGITransport
    │           └── api_client: CatVote ApiClient sharing test_client
    └── seed_payload:    Records shaped like the external image source's
"""

import os
import tempfile
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any catvote imports
os.environ["DATABASE_PATH"] = os.path.join(
    tempfile.mkdtemp(prefix="catvote_test_"), "database.db"
)
os.environ["SENTRY_DSN"] = ""
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from catvote.client.api import ApiClient  # noqa: E402
from catvote.database import Store  # noqa: E402
from catvote.main import create_app  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_list_cats_db_failure(mock_db_session):
            mock_db_session.execute.side_effect = SQLAlchemyError("boom")
            with pytest.raises(DatabaseError):
                await cat_service.list_cats(mock_db_session)
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
async def store(tmp_path) -> AsyncGenerator[Store, None]:
    """A Store on a fresh SQLite file with all tables created."""
    store = Store(f"sqlite+aiosqlite:///{tmp_path / 'catvote.db'}")
    await store.create_tables()
    yield store
    await store.dispose()


@pytest_asyncio.fixture
async def db_session(store):
    """
    A session on the test store.

    Services only flush; tests that need data visible to another session
    (e.g. the HTTP client) must commit explicitly.
    """
    async with store.session_factory() as session:
        yield session


@pytest.fixture
def app(store):
    return create_app(store)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Uses ASGITransport to route requests directly to the app, so no server
    is started. The lifespan does not run; the store fixture has already
    created the tables.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def api_client(test_client):
    return ApiClient(http_client=test_client)


@pytest.fixture
def seed_payload():
    """Two records in the external image source's shape, extra keys included."""
    return [
        {"id": "abc", "url": "https://cdn2.thecatapi.com/images/abc.jpg", "width": 640, "height": 480},
        {"id": "xyz", "url": "https://cdn2.thecatapi.com/images/xyz.jpg", "width": 800, "height": 600},
    ]
