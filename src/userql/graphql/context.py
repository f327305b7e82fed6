"""Request-scoped execution context for GraphQL resolvers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

if TYPE_CHECKING:
    from ..database.gateway import UserStore


class InternalConfigurationError(Exception):
    """Raised when a resolver runs without the dependencies it needs.

    This is a wiring problem in the hosting service, not a lookup miss.
    """

    pass


class LookupContext(BaseContext):
    """Capabilities handed to resolvers for one request.

    The store is a shared reference to the process-wide UserStore; the
    context neither owns nor copies it.
    """

    def __init__(
        self,
        store: UserStore | None,
        expose_credentials: bool = False,
        strict: bool = True,
    ):
        super().__init__()
        self.store = store
        self.expose_credentials = expose_credentials
        # False restores the old null-without-error result for missing wiring
        self.strict = strict

    def __repr__(self) -> str:
        return (
            f"LookupContext(store={self.store!r}, "
            f"expose_credentials={self.expose_credentials}, strict={self.strict})"
        )
