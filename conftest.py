import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Optional overrides for local test runs (e.g. TIMEZONE, LOG_LEVEL)
env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=True)

# Settings require a DATABASE_URL at import time; the fixtures below never use it.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

from libs.common.config import get_settings  # noqa: E402
from libs.db.base import Base  # noqa: E402

# Import models so metadata includes every table
from services.store_service import models as _store_models  # noqa: E402,F401

get_settings.cache_clear()

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh in-memory database per test. StaticPool keeps the single
    connection alive so every session sees the same database.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a database session. Workflows commit and roll back for real;
    the database is discarded with the engine.
    """
    session_factory = async_sessionmaker(
        bind=test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session


@pytest.fixture
def store_app(db_session):
    """
    Store service app with the DB dependency bound to the test session.
    """
    from libs.db.session import get_async_db
    from services.store_service.app.main import create_app

    app = create_app()
    app.dependency_overrides[get_async_db] = lambda: db_session
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(store_app) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient talking to the store app in-process.
    """
    async with AsyncClient(
        transport=ASGITransport(app=store_app), base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture
def enforce_transitions(monkeypatch):
    """Turn on order status transition checks for one test."""
    monkeypatch.setenv("ENFORCE_ORDER_TRANSITIONS", "true")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
