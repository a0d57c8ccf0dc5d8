"""Key-value storage for receipts and template settings."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path

from .schema import ensure_schema

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "~/.config/weighslip/weighslip.db"


class KeyValueStore:
    """Manages the kv_store table. Every write replaces the whole value."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get(self, key: str) -> str | None:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        conn = self._get_conn()
        conn.execute(
            """INSERT INTO kv_store (key, value) VALUES (?, ?)
               ON CONFLICT(key) DO UPDATE
               SET value = excluded.value,
                   updated_at = datetime('now', 'localtime')""",
            (key, value),
        )
        conn.commit()

    def delete(self, key: str) -> None:
        conn = self._get_conn()
        conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        conn.commit()

    def get_json(self, key: str, default=None):
        """Decode a stored JSON value.

        Missing keys and unparseable values both return ``default``.
        """
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Ignoring malformed JSON stored under %r", key)
            return default

    def set_json(self, key: str, value) -> None:
        self.set(key, json.dumps(value, ensure_ascii=False))
