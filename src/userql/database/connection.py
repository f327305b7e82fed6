"""
Database connection management
"""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from ..config import settings
from ..logging import get_logger

logger = get_logger(__name__)

_ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "postgres://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


def get_database_url() -> str:
    """Get the configured database URL."""
    return settings.database_url


def to_async_url(database_url: str) -> str:
    """Rewrite a plain connection URL to use an asyncio driver.

    URLs that already name a driver (``postgresql+asyncpg://``) are returned
    unchanged.
    """
    for prefix, async_prefix in _ASYNC_DRIVERS.items():
        if database_url.startswith(prefix):
            return async_prefix + database_url[len(prefix) :]
    return database_url


def create_engine_for_url(
    database_url: str,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    echo: bool | None = None,
) -> AsyncEngine:
    """Create the shared async engine for a connection URL."""
    async_url = to_async_url(database_url)
    echo = settings.sql_echo if echo is None else echo

    if async_url.startswith("sqlite"):
        # SQLite uses a static/singleton pool; sizing arguments are rejected
        engine = create_async_engine(async_url, echo=echo)
    else:
        engine = create_async_engine(
            async_url,
            pool_size=settings.database_pool_size if pool_size is None else pool_size,
            max_overflow=settings.database_max_overflow if max_overflow is None else max_overflow,
            pool_pre_ping=True,
            echo=echo,
        )

    logger.info("Database engine created", database_url=engine.url.render_as_string())
    return engine


def describe_connection_error(error: BaseException, database_url: str | None = None) -> str:
    """Turn a connection failure into a message an operator can act on."""
    error_str = str(error)
    error_type = type(error).__name__

    if "does not exist" in error_str and "role" in error_str:
        db_url = database_url or get_database_url()
        db_name = db_url.split("/")[-1].split("?")[0]
        return (
            f"Cannot connect to database: {error_str}\n"
            f"This usually means:\n"
            f"  1. The database server is not running\n"
            f"  2. The database '{db_name}' doesn't exist\n"
            f"  3. The database user/role doesn't exist"
        )
    elif "Connection refused" in error_str or "could not connect" in error_str:
        return (
            f"Cannot connect to database server: {error_str}\n"
            f"The database server appears to be down or unreachable."
        )
    elif "password authentication failed" in error_str:
        return (
            f"Database authentication failed: {error_str}\n"
            f"Please check your database credentials."
        )
    else:
        return f"Database connection error ({error_type}): {error_str}"
