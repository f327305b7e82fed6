"""
Main FastAPI application for the userql service
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from ..database.gateway import StoreError, UserStore, create_user_store
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

# Configure logging before creating logger
configure_logging(debug=settings.debug)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Opens the single UserStore shared by every request unless one was
    injected through create_app.
    """
    logger.info("Starting userql API...")

    owns_store = app.state.user_store is None
    if owns_store:
        app.state.user_store = create_user_store(settings.database_url)

    try:
        await app.state.user_store.ping()
        logger.info("Database connection validation successful")
    except StoreError as e:
        # Lookups will report store errors until the database comes back
        logger.error("Database connection validation failed", error=str(e))

    yield

    logger.info("Shutting down userql API...")
    if owns_store:
        await app.state.user_store.dispose()
        app.state.user_store = None


def create_app(user_store: UserStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="userql API",
        description="GraphQL lookup of users by username or email",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.user_store = user_store

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check(request: Request):  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        store: UserStore | None = request.app.state.user_store
        if store is None:
            return {"status": "degraded", "version": __version__, "database": "not configured"}

        try:
            await store.ping()
        except StoreError as e:
            return {"status": "degraded", "version": __version__, "database": str(e)}

        return {"status": "healthy", "version": __version__, "database": "ok"}

    try:
        from ..graphql.schema import create_graphql_router, validate_schema

        logger.info("Validating GraphQL schema...")
        validate_schema()

        app.include_router(create_graphql_router(), prefix="")
        logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")
    except Exception as e:  # pragma: no cover
        logger.error("Failed to initialize GraphQL endpoint", error=str(e))
        # Fail fast: the server should not start with a broken schema
        raise

    return app


# Create the main application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "userql.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
