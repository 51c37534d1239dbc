"""
Pytest configuration and fixtures for Taskin tests.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import taskin.models  # noqa: F401
from taskin.config import Settings
from taskin.database import enable_sqlite_foreign_keys, get_session
from taskin.main import create_app
from taskin.metrics import TaskinMetrics
from taskin.persistence import TaskinDbContext, UnitOfWork


# One in-memory database per test, shared by every session of that test
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session


@pytest.fixture
def db(test_session) -> TaskinDbContext:
    return TaskinDbContext(test_session)


@pytest.fixture
def uow(test_session) -> UnitOfWork:
    return UnitOfWork(test_session)


@pytest.fixture
def app():
    """A fresh application, so metrics start from zero in every test."""
    return create_app(Settings(cors_origins=["http://localhost:4200"]))


@pytest.fixture
def metrics(app) -> TaskinMetrics:
    return app.state.metrics


@pytest_asyncio.fixture(scope="function")
async def client(app, test_engine):
    """Create an async test client with test database."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_session():
        async with async_session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_project(client):
    """Create a project through the API and return its id."""

    async def _make(**overrides) -> str:
        payload = {"name": "Project", **overrides}
        response = await client.post("/api/projects/", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _make


@pytest.fixture
def make_task(client):
    """Create a task through the API and return its id."""

    async def _make(project_id: str, **overrides) -> str:
        payload = {"description": "Task", "projectId": project_id, **overrides}
        response = await client.post("/api/tasks/", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _make


@pytest.fixture
def make_pomodoro(client):
    """Record a pomodoro through the API and return its id."""

    async def _make(task_id: str, **overrides) -> str:
        payload = {"taskId": task_id, "startTime": "2025-01-01T09:00:00Z", **overrides}
        response = await client.post("/api/pomodoros/", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _make
