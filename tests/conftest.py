"""
Pytest configuration and fixtures.
Provides a configured app, HTTP clients bound to it and an in-memory database.
"""

from itertools import count

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.db.base import Base
from app.db.repositories.location_repository import LocationRepository
from app.db.session import get_db
from app.main import create_app
import app.models  # noqa: F401 - register models with Base


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_API_KEY = "test-api-key"
BASE_URL = "http://test"
API_PREFIX = "/api/v1"


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an isolated app: fixed key, no rate limiting, no startup DB work."""
    return Settings(
        API_KEY=TEST_API_KEY,
        DATABASE_URL=TEST_DATABASE_URL,
        DEBUG=False,
        RATE_LIMIT_ENABLED=False,
        AUTO_CREATE_TABLES=False,
        SEED_ON_STARTUP=False,
    )


@pytest.fixture
async def test_engine():
    """In-memory engine with all tables created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_db_session(test_engine):
    """
    Create a test database session.
    The API under test shares this session, so data written here is visible
    to requests and vice versa.
    """
    test_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with test_session_maker() as session:
        yield session


@pytest.fixture
def test_app(test_settings, test_db_session):
    """Application wired to the test session."""
    application = create_app(test_settings)

    async def override_get_db():
        yield test_db_session

    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    """HTTP client sending the valid API key."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url=BASE_URL,
        headers={"X-API-Key": TEST_API_KEY},
    ) as c:
        yield c


@pytest.fixture
async def anon_client(test_app):
    """HTTP client without any API key."""
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url=BASE_URL) as c:
        yield c


@pytest.fixture
def location_data():
    """Build unique, valid location payloads."""
    sequence = count(1)

    def build(**overrides):
        n = next(sequence)
        data = {
            "code": f"LOC{n:03d}",
            "name": f"Location {n} Office",
            "image": f"https://example.com/images/location-{n}.jpg",
        }
        data.update(overrides)
        return data

    return build


@pytest.fixture
def location_factory(test_db_session, location_data):
    """Persist locations directly through the repository."""
    repo = LocationRepository(test_db_session)

    async def create(**overrides):
        location = await repo.create(location_data(**overrides))
        await test_db_session.commit()
        return location

    return create
