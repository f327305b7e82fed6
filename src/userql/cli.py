#!/usr/bin/env python3
"""
Main CLI entry point for the userql server.
"""

import asyncio
import json
import os
import sys

import click
import uvicorn

from userql import __version__
from userql.config import settings
from userql.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="userql")
def cli() -> None:
    """userql CLI - run the GraphQL server and query the user store."""
    pass


@cli.command()
@click.option(
    "--host",
    default=settings.api_host,
    help=f"Host to bind to (default: {settings.api_host})",
)
@click.option(
    "--port",
    default=settings.api_port,
    type=int,
    help=f"Port to bind to (default: {settings.api_port})",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.option(
    "--workers",
    default=1,
    type=int,
    help="Number of worker processes (default: 1)",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Start the GraphQL API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info(
        "Starting userql API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # Workers re-import the app, so settings travel through the environment
    if log_level == "debug":
        os.environ["USERQL_DEBUG"] = "true"
        os.environ["USERQL_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("USERQL_DEBUG", "false")
        os.environ.setdefault("USERQL_LOG_LEVEL", log_level)

    try:
        if reload or workers > 1:
            uvicorn.run(
                "userql.api.app:app",
                host=host,
                port=port,
                reload=reload,
                workers=(workers if not reload else 1),
                log_level=log_level,
                access_log=True,
            )
        else:
            from userql.api.app import app

            uvicorn.run(
                app,
                host=host,
                port=port,
                log_level=log_level,
                access_log=True,
            )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("check-db")
@click.option("--database-url", default=None, help="Override USERQL_DATABASE_URL")
def check_db(database_url: str | None) -> None:
    """Check that the user store is reachable."""
    from userql.database.gateway import StoreError, create_user_store

    configure_logging()

    async def do_check():
        store = create_user_store(database_url or settings.database_url)
        try:
            await store.ping()
        finally:
            await store.dispose()

    try:
        asyncio.run(do_check())
    except StoreError as e:
        logger.error("Database check failed", error=str(e))
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    click.echo("✓ Database connection successful")


@cli.command()
@click.option("--username", default="", help="Username to match (default: empty)")
@click.option("--email", default="", help="Email to match (default: empty)")
@click.option("--database-url", default=None, help="Override USERQL_DATABASE_URL")
def lookup(username: str, email: str, database_url: str | None) -> None:
    """Run the user query against the store and print the JSON result."""
    from userql.database.gateway import create_user_store
    from userql.graphql.context import LookupContext
    from userql.graphql.schema import execute_query

    configure_logging()

    query = """
        query LookupUser($username: String!, $email: String!) {
            user(username: $username, email: $email) {
                id
                username
                email
                password
            }
        }
    """

    async def do_lookup():
        store = create_user_store(database_url or settings.database_url)
        try:
            context = LookupContext(
                store=store,
                expose_credentials=settings.expose_credentials,
                strict=not settings.legacy_null_on_missing_store,
            )
            return await execute_query(
                query, context, variables={"username": username, "email": email}
            )
        finally:
            await store.dispose()

    result = asyncio.run(do_lookup())
    click.echo(json.dumps(result.to_dict(), indent=2))
    if result.errors:
        sys.exit(1)


@cli.command()
def schema() -> None:
    """Print the GraphQL schema in SDL form."""
    from userql.graphql.schema import schema as graphql_schema

    click.echo(graphql_schema.as_str())


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
