"""Lazy load controller: populates the in-memory store from the adapter on demand.

Every path here is awaited; adapter failures propagate as
:class:`~persistmap.utils.errors.AdapterError`.

Single-key and batch fetches treat misses differently:

* ``fetch(key)`` records a miss as *confirmed absent* when the adapter
  manages its own expiry, so later local lookups can tell "looked up, not
  there" apart from "never looked up".
* ``fetch_many(keys)`` never records misses, whatever the adapter's flags.

Both behaviours are kept as-is; callers that need confirmed-absent markers
for a batch should fetch the keys one at a time.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from persistmap.core.store import CoreStore
from persistmap.core.ttl import records_absence
from persistmap.interfaces.store_adapter import IStoreAdapter, Key
from persistmap.utils.errors import AdapterError
from persistmap.utils.logging import get_logger


class LazyLoadController:
    """Resolves keys against the adapter and writes hits into the store."""

    def __init__(self, store: CoreStore, adapter: IStoreAdapter) -> None:
        self._store = store
        self._adapter = adapter
        self._provider = adapter.get_provider_name()
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def fetch(self, key: Key) -> Any | None:
        """Load one key; returns its value or ``None``."""
        value = await self._resolve(key)
        if value is not None:
            self._store.put(key, value)
            return value
        if records_absence(self._adapter):
            self._store.mark_absent(key)
            self._logger.debug("fetch_miss", key=key, recorded=True)
        else:
            self._logger.debug("fetch_miss", key=key, recorded=False)
        return None

    async def fetch_many(self, keys: Iterable[Key]) -> None:
        """Load several keys, strictly one after another in the order given.

        Hits land in the store in input order.  Misses leave the store
        untouched: no confirmed-absent marker is written here, even for
        adapters that manage expiry.
        """
        loaded = 0
        for key in keys:
            value = await self._resolve(key)
            if value is not None:
                self._store.put(key, value)
                loaded += 1
        self._logger.debug("fetch_many_complete", loaded=loaded)

    async def fetch_everything(self) -> int:
        """Bulk-load the adapter's entire key space; returns the number of entries loaded."""
        try:
            entries: Mapping[Key, Any] = await self._adapter.fetch_all()
        except Exception as exc:
            raise AdapterError(f"bulk load failed: {exc}", provider_name=self._provider) from exc
        count = self._store.load(entries)
        self._logger.info("bulk_load_complete", provider=self._provider, entries=count)
        return count

    async def _resolve(self, key: Key) -> Any | None:
        try:
            return await self._adapter.fetch(key)
        except Exception as exc:
            raise AdapterError(
                f"fetch failed for key {key!r}: {exc}",
                provider_name=self._provider,
            ) from exc
