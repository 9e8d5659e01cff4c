"""
StudyNotes — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── db_engine:       In-memory SQLite engine with the notes table created
    ├── db_session:      Session on db_engine
    ├── test_client:     HTTPX AsyncClient talking to the app in-process
    ├── notes_client:    The editor's NotesClient routed to the same app
    └── make_block:      Factory for Block instances
"""

import os

# Override settings for testing BEFORE any studynotes imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["API_BASE_URL"] = "http://test"

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from studynotes.database import Base, get_db_session  # noqa: E402
from studynotes.editor.client import NotesClient  # noqa: E402
from studynotes.main import app  # noqa: E402
from studynotes.schemas.block import Block  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_note(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
            result = await note_service.get_note(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine. StaticPool keeps a single connection so every
    session sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def db_override(db_engine):
    """Routes the app's get_db_session dependency to the test engine."""
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override
    yield
    app.dependency_overrides.pop(get_db_session, None)


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db_override):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def notes_client(db_override):
    """The editor's API client, talking to the app in-process."""
    client = NotesClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
        retry_min_wait=0,
        retry_max_wait=0,
    )
    yield client
    await client.aclose()


# ══════════════════════════════════════════════════════════════════════════
# Data Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_block():
    """
    Factory for blocks with predictable ids.

    Usage:
        block = make_block("b1", "checkbox-list", "Buy milk", {"checked": True})
    """
    def _make(block_id="b1", block_type="paragraph", content="", metadata=None):
        return Block.model_validate({
            "id": block_id,
            "type": block_type,
            "content": content,
            "metadata": metadata,
        })

    return _make
