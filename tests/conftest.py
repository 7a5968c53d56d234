"""
Test configuration and fixtures for PickleFantasy

Every test gets its own in-memory SQLite database, so services are free to
commit. The FastAPI app is exercised over ASGITransport with the database
and Redis dependencies overridden.

Usage:
    pytest tests/
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SCORING_FANOUT", "sync")
os.environ.setdefault("PAYOUT_PROVIDER", "mock")

import pytest
from typing import AsyncGenerator
from unittest.mock import AsyncMock

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI

from app.db.base import Base
from app.db.session import get_db
from app.core.redis_client import get_redis_client
from app.main import app
from app.services.payouts import MockPayoutProvider, set_payout_provider
import app.models as _models  # noqa: F401


@pytest.fixture
async def db_engine():
    """Fresh in-memory SQLite database with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Database session for arranging data and calling services directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_redis():
    """
    Stand-in for the Redis client.

    set() behaves like SETNX: True the first time a key is seen, None after.
    """
    seen = set()

    async def _set(key, value, nx=False, ex=None):
        if nx and key in seen:
            return None
        seen.add(key)
        return True

    async def _delete(key):
        seen.discard(key)
        return 1

    client = AsyncMock()
    client.set.side_effect = _set
    client.delete.side_effect = _delete
    client.seen = seen
    return client


@pytest.fixture(autouse=True)
def payout_provider():
    """Every test starts from a fresh mock payout provider."""
    provider = MockPayoutProvider()
    set_payout_provider(provider)
    yield provider
    set_payout_provider(None)


@pytest.fixture
async def test_app(session_factory, fake_redis) -> AsyncGenerator[FastAPI, None]:
    """FastAPI app wired to the test database and fake Redis."""
    async def get_test_db():
        async with session_factory() as session:
            yield session

    async def get_test_redis():
        return fake_redis

    app.dependency_overrides[get_db] = get_test_db
    app.dependency_overrides[get_redis_client] = get_test_redis

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for API tests."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
