"""
Root GraphQL query definitions
"""

import strawberry

from ..types.user import User


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def user(self, info: strawberry.Info, username: str, email: str) -> User | None:
        """Get the first user matching the username or the email."""
        from ..resolvers.user import resolve_user_by_username_or_email

        return await resolve_user_by_username_or_email(info, username, email)
