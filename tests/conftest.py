"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import AsyncGenerator, Generator
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from courier.config import settings

IN_MEMORY_URL = "sqlite+aiosqlite://"
TEST_SECRET = "test-secret-key-for-testing-only"


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def secret(monkeypatch: pytest.MonkeyPatch) -> str:
    """Install a known signing secret on the global settings."""
    monkeypatch.setattr(settings, "secret", TEST_SECRET)
    return TEST_SECRET


@pytest.fixture
def make_token(secret: str):
    """Build signed tokens with arbitrary claims and lifetimes."""

    def _make(claims: dict[str, Any] | None = None, expires_in: timedelta = timedelta(minutes=30)):
        payload = {
            "id": 1,
            "email": "hello@robin.com",
            "username": "rwieruch",
            "role": "ADMIN",
            "exp": datetime.now(UTC) + expires_in,
        }
        payload.update(claims or {})
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Provide a session factory bound to a fresh in-memory database."""
    from courier.database.connection import (
        dispose_database,
        get_session_factory,
        init_database,
        reset_database,
        sync_schema,
    )

    reset_database()
    init_database(IN_MEMORY_URL, force_reinit=True)
    await sync_schema(force=True)

    yield get_session_factory()

    await dispose_database()


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async SQLAlchemy session for testing."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(session_factory: async_sessionmaker[AsyncSession]) -> datetime:
    """Seed the fixture users; returns the base timestamp used."""
    from courier.database.connection import session_scope
    from courier.database.seed_data import create_users_with_messages

    base = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)
    async with session_scope(session_factory) as session:
        await create_users_with_messages(session, base)
    return base


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
