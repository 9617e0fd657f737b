"""
Database module for LocalStore.

Provides async SQLAlchemy support for the SQL store adapter.
"""
from __future__ import annotations

from localstore.db.database import (
    init_db,
    close_db,
    AsyncSessionLocal,
)
from localstore.db.models import KeyValueEntry

__all__ = [
    "init_db",
    "close_db",
    "AsyncSessionLocal",
    "KeyValueEntry",
]
