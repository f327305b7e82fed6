"""
Database module for userql
"""

from .gateway import StoreError, UserStore, create_user_store
from .models import Base, Users

__all__ = ["Base", "StoreError", "UserStore", "Users", "create_user_store"]
