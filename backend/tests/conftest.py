"""
Registros API - Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file under pytest's tmp_path, so tests
       never share rows and never touch ./registros.db.

Fixture Hierarchy (all function-scoped):
    ├── test_settings: Settings pointing at a temporary database file
    ├── database: Database with the schema created, disposed after the test
    ├── record_store: RecordStore over that database
    ├── app: FastAPI app built by create_app(test_settings)
    └── test_client: HTTPX AsyncClient talking to `app` with its lifespan running
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Keep the module-level singleton away from the developer's .env values
os.environ.setdefault("LOG_LEVEL", "WARNING")

from registros.config import Settings  # noqa: E402
from registros.database import Database  # noqa: E402
from registros.main import create_app  # noqa: E402
from registros.services.record_store import RecordStore  # noqa: E402


@pytest.fixture
def db_path(tmp_path):
    """Path of the per-test SQLite file (not created until first connect)."""
    return tmp_path / "registros_test.db"


@pytest.fixture
def test_settings(db_path):
    """Settings for one isolated app instance."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{db_path}",
        log_level="WARNING",
        cors_origins="*",
        expose_storage_errors=False,
    )


@pytest_asyncio.fixture
async def database(test_settings) -> AsyncGenerator[Database, None]:
    """A Database with the `registros` table already created."""
    db = Database(test_settings.database_url)
    await db.create_schema()
    yield db
    await db.dispose()


@pytest.fixture
def record_store(database):
    return RecordStore(database)


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for endpoint tests.

    ASGITransport does not send lifespan events, so the app's lifespan is
    entered here; that is what opens the RecordStore on app.state.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/registros")
            assert response.status_code == 200
    """
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
