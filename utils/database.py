from __future__ import annotations

"""SQLite-backed "local storage" for the portal.

A browser keeps the auth token in ``localStorage``; the Python portal keeps
it in a tiny key/value table instead so that it survives Streamlit reruns
and process restarts.

Table (created on demand):

* local_storage(key TEXT PRIMARY KEY, value TEXT, updated_at TEXT)
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, Generator, Optional

from config.config import AUTH_TOKEN_KEY, LOCAL_STORAGE_PATH

logger = logging.getLogger(__name__)

ENV_STORAGE_PATH = "VIKSIT_LOCAL_STORAGE_PATH"


def _resolve_storage_path(path: Optional[Path] = None) -> Path:
    """Resolve the SQLite file path.

    Order of precedence:
      1. An explicit ``path`` argument.
      2. ``VIKSIT_LOCAL_STORAGE_PATH`` environment variable.
      3. ``LOCAL_STORAGE_PATH`` from the configuration module.
    """
    if path is None:
        path = Path(os.getenv(ENV_STORAGE_PATH) or LOCAL_STORAGE_PATH)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


@contextmanager
def get_connection(path: Optional[Path] = None) -> Generator[sqlite3.Connection, None, None]:
    """Context manager yielding a SQLite connection.

    The connection uses ``row_factory=sqlite3.Row`` and commits on
    successful exit, rolling back on exceptions.
    """
    conn = sqlite3.connect(_resolve_storage_path(path))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except Exception as exc:  # noqa: BLE001
        conn.rollback()
        logger.exception("Local storage error: %s", exc)
        raise
    finally:
        conn.close()


def init_db(path: Optional[Path] = None) -> None:
    """Create the local storage table if it does not already exist."""
    with get_connection(path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS local_storage (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )


class LocalStorage:
    """Key/value store with the ``localStorage`` get/set/remove surface."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = _resolve_storage_path(path)
        init_db(self.path)

    def get_item(self, key: str) -> Optional[str]:
        with get_connection(self.path) as conn:
            row = conn.execute("SELECT value FROM local_storage WHERE key = ?", (key,)).fetchone()
        return None if row is None else str(row["value"])

    def set_item(self, key: str, value: str) -> None:
        now = datetime.utcnow().isoformat()
        with get_connection(self.path) as conn:
            conn.execute(
                """
                INSERT INTO local_storage(key, value, updated_at) VALUES(?,?,?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, now),
            )

    def remove_item(self, key: str) -> None:
        with get_connection(self.path) as conn:
            conn.execute("DELETE FROM local_storage WHERE key = ?", (key,))

    def items(self) -> Dict[str, str]:
        with get_connection(self.path) as conn:
            rows = conn.execute("SELECT key, value FROM local_storage").fetchall()
        return {str(r["key"]): str(r["value"]) for r in rows}


class TokenStore:
    """Auth token persisted under the fixed ``AUTH_TOKEN_KEY``."""

    def __init__(self, storage: Optional[LocalStorage] = None, key: str = AUTH_TOKEN_KEY) -> None:
        self.storage = storage or LocalStorage()
        self.key = key

    def get(self) -> Optional[str]:
        return self.storage.get_item(self.key)

    def set(self, token: str) -> None:
        self.storage.set_item(self.key, token)

    def clear(self) -> None:
        self.storage.remove_item(self.key)


class MemoryTokenStore(TokenStore):
    """Token store that never touches disk (demo mode and tests)."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token
        self.key = AUTH_TOKEN_KEY

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


__all__ = [
    "get_connection",
    "init_db",
    "LocalStorage",
    "TokenStore",
    "MemoryTokenStore",
]
