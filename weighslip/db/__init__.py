"""SQLite key-value storage."""

from .kvstore import DEFAULT_DB_PATH, KeyValueStore
from .schema import ensure_schema

__all__ = [
    "DEFAULT_DB_PATH",
    "KeyValueStore",
    "ensure_schema",
]
