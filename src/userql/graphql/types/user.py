"""
User GraphQL type definitions
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

if TYPE_CHECKING:
    from ...database.models import Users

CREDENTIAL_MASK = "********"


@strawberry.type
class User:
    """User type for GraphQL API."""

    id: int
    username: str | None
    email: str | None
    password: str | None = strawberry.field(
        description="Stored credential; masked unless credential exposure is enabled."
    )

    @classmethod
    def from_record(cls, record: Users, expose_credentials: bool = False) -> User:
        """Project a users row onto the GraphQL type."""
        return cls(
            id=record.id,
            username=record.username,
            email=record.email,
            password=record.password if expose_credentials else CREDENTIAL_MASK,
        )
