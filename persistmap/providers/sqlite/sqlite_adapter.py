"""SQLite-backed store adapter.

Persists entries to a local SQLite database using ``aiosqlite`` for async
I/O.  Each adapter owns one table (named after the map), so several maps can
share a database file.  Keys and values are stored as JSON text; expiry is
an absolute ``expires_at`` timestamp that is filtered on every read and
pruned on :meth:`init`.
"""

from __future__ import annotations

import json
import re
import time
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiosqlite
import structlog

from persistmap.interfaces.store_adapter import IStoreAdapter, Key
from persistmap.utils.errors import InvalidArgumentError

if TYPE_CHECKING:
    from persistmap.core.store import CoreStore

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/persistmap.db")

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS {table} (
    key_json    TEXT PRIMARY KEY,
    value_json  TEXT NOT NULL,
    expires_at  REAL,
    updated_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_UPSERT_SQL = """\
INSERT INTO {table} (key_json, value_json, expires_at)
VALUES (?, ?, ?)
ON CONFLICT(key_json)
DO UPDATE SET value_json = excluded.value_json,
              expires_at = excluded.expires_at,
              updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now');
"""

_SELECT_SQL = """\
SELECT value_json FROM {table}
WHERE key_json = ? AND (expires_at IS NULL OR expires_at > ?);
"""

_SELECT_ALL_SQL = """\
SELECT key_json, value_json FROM {table}
WHERE expires_at IS NULL OR expires_at > ?
ORDER BY rowid;
"""

_DELETE_SQL = "DELETE FROM {table} WHERE key_json = ?;"

_DELETE_ALL_SQL = "DELETE FROM {table};"

_PRUNE_SQL = "DELETE FROM {table} WHERE expires_at IS NOT NULL AND expires_at <= ?;"


class SQLiteStoreAdapter(IStoreAdapter):
    """Durable backing store in a single SQLite table.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file; parent directories are created.
    name:
        Table name; must be a plain SQL identifier.
    defer_writes:
        Whether the map should treat writes as fire-and-forget.  Set to
        ``False`` when callers must know a write reached disk.
    """

    def __init__(
        self,
        db_path: str | Path = _DEFAULT_DB_PATH,
        name: str = "persistmap",
        defer_writes: bool = True,
    ) -> None:
        if not _TABLE_NAME_RE.match(name):
            raise InvalidArgumentError(
                f"Table name must be a plain identifier, got {name!r}",
                provider_name="sqlite",
            )
        self._db_path = Path(db_path)
        self._table = name
        self._defer_writes = defer_writes

    # ------------------------------------------------------------------
    # IStoreAdapter implementation
    # ------------------------------------------------------------------

    async def init(self, store: CoreStore) -> None:
        """Create the table if needed and prune expired rows."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_CREATE_TABLE_SQL.format(table=self._table))
            cursor = await db.execute(_PRUNE_SQL.format(table=self._table), (time.time(),))
            pruned = cursor.rowcount
            await db.commit()
        logger.info(
            "sqlite_adapter_initialized",
            path=str(self._db_path),
            table=self._table,
            pruned=pruned,
        )

    async def fetch_all(self) -> Mapping[Key, Any]:
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(_SELECT_ALL_SQL.format(table=self._table), (time.time(),))
            rows = await cursor.fetchall()
        return {json.loads(key_json): json.loads(value_json) for key_json, value_json in rows}

    async def fetch(self, key: Key) -> Any | None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(
                _SELECT_SQL.format(table=self._table),
                (json.dumps(key), time.time()),
            )
            row = await cursor.fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    async def set(self, key: Key, value: Any, ttl: float | None = None) -> None:
        expires_at = time.time() + ttl if ttl else None
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(
                _UPSERT_SQL.format(table=self._table),
                (json.dumps(key), json.dumps(value), expires_at),
            )
            await db.commit()

    async def delete(self, key: Key) -> None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_DELETE_SQL.format(table=self._table), (json.dumps(key),))
            await db.commit()

    async def bulk_delete(self) -> None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_DELETE_ALL_SQL.format(table=self._table))
            await db.commit()
        logger.info("sqlite_table_cleared", table=self._table)

    def manages_expiry(self) -> bool:
        return True

    def defers_writes(self) -> bool:
        return self._defer_writes

    def get_provider_name(self) -> str:
        return "sqlite"
