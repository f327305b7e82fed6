"""
userql
GraphQL lookup of users by username or email
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
