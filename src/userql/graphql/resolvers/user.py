from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ...config import settings
from ...logging import get_logger
from ..context import InternalConfigurationError, LookupContext

if TYPE_CHECKING:
    from ..types.user import User

logger = get_logger(__name__)


def _missing_dependency(message: str, strict: bool) -> None:
    """Log a wiring problem and raise it unless running in legacy mode."""
    logger.error(message)
    if strict:
        raise InternalConfigurationError(message)


async def resolve_user_by_username_or_email(
    info: strawberry.Info, username: str, email: str
) -> User | None:
    """
    Resolve the first user whose username or email matches.

    Store failures propagate so the executor records them in the error list.
    A missing store is an InternalConfigurationError, or a plain null result
    when the context (or settings) ask for the legacy behaviour.
    """
    context = info.context
    if not isinstance(context, LookupContext):
        _missing_dependency(
            "User store not found in GraphQL context",
            strict=not settings.legacy_null_on_missing_store,
        )
        return None

    if context.store is None:
        _missing_dependency("User store in GraphQL context is empty", strict=context.strict)
        return None

    record = await context.store.find_user_by_username_or_email(username, email)
    if record is None:
        return None

    from ..types.user import User as UserType

    return UserType.from_record(record, expose_credentials=context.expose_credentials)
