"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

from userql.database.gateway import UserStore, create_user_store
from userql.database.models import Base, Users


async def _seed_users(store: UserStore, *rows: dict[str, Any]) -> list[Users]:
    users = [Users(**row) for row in rows]
    async with store.session() as session:
        session.add_all(users)
        await session.commit()
    return users


@pytest.fixture
def seed_users():
    """Insert rows into the users table and return them with ids assigned."""
    return _seed_users


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """SQLite database file unique to the test."""
    return f"sqlite:///{tmp_path / 'users.db'}"


@pytest_asyncio.fixture
async def user_store(database_url: str) -> AsyncGenerator[UserStore, None]:
    """A UserStore backed by a fresh SQLite database with the users table."""
    store = create_user_store(database_url, echo=False)
    async with store.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield store
    await store.dispose()


@pytest_asyncio.fixture
async def unreachable_store(tmp_path: Path) -> AsyncGenerator[UserStore, None]:
    """A UserStore pointing at a database file that cannot be opened."""
    store = create_user_store(f"sqlite:///{tmp_path / 'missing' / 'nowhere.db'}", echo=False)
    yield store
    await store.dispose()


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
