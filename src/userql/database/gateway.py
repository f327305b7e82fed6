"""
Store gateway: the single read path into the users table.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import or_, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ..logging import get_logger
from .connection import create_engine_for_url, describe_connection_error
from .models import Users

logger = get_logger(__name__)


class StoreError(Exception):
    """Raised when the store could not execute a query."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class UserStore:
    """Owns one logical connection (an engine and its session factory).

    One instance is created at process start and shared read-only by every
    request; it keeps no per-request state.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self._session_factory() as session:
            yield session

    async def find_user_by_username_or_email(self, username: str, email: str) -> Users | None:
        """Return the first user whose username or email matches.

        When several rows match, the lowest id wins. Returns None when nothing
        matches.

        Raises:
            StoreError: If the query could not be executed.
        """
        stmt = (
            select(Users)
            .where(or_(Users.username == username, Users.email == email))
            .order_by(Users.id.asc())
            .limit(1)
        )

        try:
            async with self.session() as session:
                result = await session.execute(stmt)
                user = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.error(
                "User lookup failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StoreError(f"User lookup failed: {e}", cause=e) from e

        if user is None:
            logger.info("User not found")
        return user

    async def ping(self) -> None:
        """Check that the store answers a trivial query.

        Raises:
            StoreError: With a descriptive message when the store is unreachable.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            message = describe_connection_error(e, self.engine.url.render_as_string())
            raise StoreError(message, cause=e) from e

    async def dispose(self) -> None:
        """Release pooled connections."""
        await self.engine.dispose()
        logger.info("Database engine disposed")


def create_user_store(
    database_url: str,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    echo: bool | None = None,
) -> UserStore:
    """Build a UserStore for a connection URL."""
    engine = create_engine_for_url(
        database_url, pool_size=pool_size, max_overflow=max_overflow, echo=echo
    )
    return UserStore(engine)
