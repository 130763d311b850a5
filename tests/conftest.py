"""
HTMX Todos: Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the test suite.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession for service unit tests (no DB)
    ├── sample_todo_data: Column values for one todo row
    ├── app: FastAPI app backed by a fresh SQLite file in tmp_path
    └── test_client: HTTPX AsyncClient talking to `app` in-process
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Set before any htmx_todo import so the module-level settings and app
# never point at a developer's ./todos.db
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

from htmx_todo.config import Settings  # noqa: E402
from htmx_todo.main import create_app  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_toggle(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = todo
            result = await todo_service.toggle_todo(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_todo_data():
    return {"id": 1, "content": "buy milk", "completed": False}


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        log_level="WARNING",
        create_tables_on_startup=True,
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """
    App with its schema created.

    ASGITransport does not run the lifespan, so tables are created and the
    engine disposed here instead.
    """
    application = create_app(test_settings)
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/todos")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
