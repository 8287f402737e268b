"""Root conftest — shared test configuration and an in-memory database per test.

Invariants:
    - Every test gets a fresh in-memory SQLite database built from Base.metadata
    - DATABASE_URL never points at a real server during tests
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

from users_api.db.base import Base  # noqa: E402
import users_api.models  # noqa: E402,F401
from users_api.infrastructure.database import DatabaseSessionManager  # noqa: E402
from users_api.infrastructure.user_repository import UserRepository  # noqa: E402


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
def user_repository(db_manager):
    return UserRepository(db_manager)
