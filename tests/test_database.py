from __future__ import annotations

"""Tests for the SQLite-backed local storage and token store."""

from pathlib import Path

from config.config import AUTH_TOKEN_KEY
from utils.database import LocalStorage, MemoryTokenStore, TokenStore, get_connection


def test_local_storage_roundtrip(tmp_path: Path) -> None:
    storage = LocalStorage(tmp_path / "nested" / "storage.db")

    assert storage.get_item("missing") is None

    storage.set_item("theme", "dark")
    storage.set_item("theme", "light")

    assert storage.get_item("theme") == "light"
    assert storage.items() == {"theme": "light"}

    storage.remove_item("theme")
    assert storage.get_item("theme") is None


def test_values_survive_a_new_instance(tmp_path: Path) -> None:
    path = tmp_path / "storage.db"
    LocalStorage(path).set_item("k", "v")

    assert LocalStorage(path).get_item("k") == "v"


def test_token_store_uses_fixed_key(tmp_path: Path) -> None:
    path = tmp_path / "storage.db"
    store = TokenStore(LocalStorage(path))

    store.set("abc")

    with get_connection(path) as conn:
        row = conn.execute("SELECT value FROM local_storage WHERE key = ?", (AUTH_TOKEN_KEY,)).fetchone()
    assert row["value"] == "abc"

    store.clear()
    assert store.get() is None


def test_memory_token_store() -> None:
    store = MemoryTokenStore("seed")
    assert store.get() == "seed"

    store.set("next")
    assert store.get() == "next"

    store.clear()
    assert store.get() is None
