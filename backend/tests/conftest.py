"""
TaskTrack Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the whole suite.

Fixture Hierarchy (all function-scoped):
    ├── mock_gateway:     AsyncMock PersistenceGateway for service tests
    ├── mock_db_session:  AsyncMock AsyncSession for gateway fault tests
    ├── database:         Database bound to a fresh SQLite file, schema created
    ├── db_session:       AsyncSession on that database
    ├── test_client:      HTTPX AsyncClient talking to create_app(database)
    └── registered_user:  a user registered and logged in through the API
"""

import os
import tempfile
from types import SimpleNamespace
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

# Must be set before tasktrack.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="tasktrack_test_"), "import.db"
)
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ORIGINS"] = "http://localhost:5173,http://allowed.test"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from tasktrack.database import Database
from tasktrack.services.gateway import PersistenceGateway


def make_task(task_id=1, task_name="buy milk", state=False, user_id=1):
    """Attribute object shaped like a Task row."""
    return SimpleNamespace(id=task_id, task_name=task_name, state=state, user_id=user_id)


def make_user(user_id=1, user_name="ana", email="ana@x.com", password="p1", tasks=None):
    """Attribute object shaped like a User row."""
    return SimpleNamespace(
        id=user_id,
        user_name=user_name,
        email=email,
        password=password,
        created_in=datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc),
        tasks=tasks or [],
    )


@pytest.fixture
def mock_gateway():
    """
    A PersistenceGateway double: every method is an AsyncMock.

    Usage:
        mock_gateway.find_user_by_id.return_value = make_user()
    """
    return AsyncMock(spec=PersistenceGateway)


@pytest.fixture
def mock_db_session():
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def database(tmp_path):
    """A Database on a scratch SQLite file with all tables created."""
    db = Database(url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from tasktrack.main import create_app

    app = create_app(database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def registered_user(test_client):
    """Registers ana@x.com and returns the login response body."""
    credentials = {"user_name": "ana", "email": "ana@x.com", "password": "p1"}
    response = await test_client.post("/register", json=credentials)
    assert response.status_code == 201

    response = await test_client.post(
        "/login", json={"email": credentials["email"], "password": credentials["password"]}
    )
    assert response.status_code == 200
    return response.json()
