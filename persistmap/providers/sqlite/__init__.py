"""SQLite backing store (aiosqlite)."""

from persistmap.providers.sqlite.sqlite_adapter import SQLiteStoreAdapter

__all__ = ["SQLiteStoreAdapter"]
