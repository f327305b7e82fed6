"""
Main GraphQL schema definition using Strawberry
"""

from dataclasses import dataclass, field
from typing import Any

import strawberry
from fastapi import Request
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter

from ..config import settings
from ..logging import get_logger
from .context import LookupContext
from .queries.root import Query

logger = get_logger(__name__)

# Built once at import and shared read-only by every request
schema = strawberry.Schema(query=Query)


@dataclass
class QueryResult:
    """Outcome of running a GraphQL document: data plus formatted errors."""

    data: dict[str, Any] | None
    errors: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the GraphQL-over-HTTP response shape."""
        result: dict[str, Any] = {"data": self.data}
        if self.errors:
            result["errors"] = self.errors
        return result


async def execute_query(
    query: str,
    context: Any,
    variables: dict[str, Any] | None = None,
    operation_name: str | None = None,
) -> QueryResult:
    """Execute a GraphQL document against the schema with a prepared context.

    Syntax and validation problems never reach a resolver; they come back as
    errors with null data. Resolver exceptions are collected the same way.
    """
    result = await schema.execute(
        query,
        variable_values=variables,
        context_value=context,
        operation_name=operation_name,
    )

    errors = [error.formatted for error in result.errors or []]
    if errors:
        logger.info("GraphQL execution returned errors", error_count=len(errors))

    return QueryResult(data=result.data, errors=errors)


def validate_schema() -> None:
    """Validate the GraphQL schema at startup.

    Raises:
        Exception: If the schema is invalid or introspection fails
    """
    try:
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise Exception(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        from graphql import get_introspection_query, graphql_sync

        result = graphql_sync(graphql_schema, get_introspection_query())
        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise Exception(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


def build_context(request: Request) -> LookupContext:
    """Build a fresh LookupContext around the application's shared store."""
    return LookupContext(
        store=getattr(request.app.state, "user_store", None),
        expose_credentials=settings.expose_credentials,
        strict=not settings.legacy_null_on_missing_store,
    )


def create_graphql_router() -> GraphQLRouter[LookupContext, None]:
    """Create a GraphQL router for FastAPI."""

    async def get_context(request: Request) -> LookupContext:
        return build_context(request)

    return GraphQLRouter(
        schema,
        path="/graphql",
        graphiql=settings.graphiql,
        context_getter=get_context,
    )
