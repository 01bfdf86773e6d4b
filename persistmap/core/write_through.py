"""Write-through controller: ``set``, ``delete`` and ``delete_all``.

The in-memory store is always updated synchronously, before the adapter is
even asked, so callers read their own writes immediately regardless of
persistence latency.  The adapter write is then either

* **deferred** -- started as a background task and not joined into the
  caller's flow; failures go to the error channel of
  :class:`~persistmap.core.receipts.WriteTracker`, or
* **awaited** -- the caller suspends until the adapter answers, and a
  failure propagates as :class:`~persistmap.utils.errors.AdapterError`.

The mode is taken from the adapter's ``defers_writes()`` flag at bind time.
With no adapter bound, only the in-memory store is touched.
"""

from __future__ import annotations

from typing import Any

import structlog

from persistmap.core.receipts import WriteReceipt, WriteTracker
from persistmap.core.store import CoreStore
from persistmap.core.ttl import resolve_ttl
from persistmap.interfaces.store_adapter import IStoreAdapter, Key
from persistmap.utils.logging import get_logger


class WriteThroughController:
    """Keeps the in-memory store and the adapter in lockstep on writes."""

    def __init__(
        self,
        store: CoreStore,
        adapter: IStoreAdapter | None,
        tracker: WriteTracker | None,
        default_ttl: float | None = None,
    ) -> None:
        self._store = store
        self._adapter = adapter
        self._tracker = tracker
        self._default_ttl = default_ttl
        self._defer = adapter.defers_writes() if adapter is not None else True
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def defers_writes(self) -> bool:
        return self._defer

    async def set(self, key: Key, value: Any, ttl: float | None = None) -> WriteReceipt | None:
        """Store *value* under *key*; returns the adapter write's receipt, if any.

        ``None`` values are rejected silently: neither the store nor the
        adapter is touched.
        """
        if value is None:
            self._logger.debug("write_rejected", key=key)
            return None
        expiry = resolve_ttl(ttl, self._default_ttl)
        self._store.put(key, value)
        if self._adapter is None:
            return None
        return await self._dispatch("set", key, self._adapter.set(key, value, expiry))

    async def delete(self, key: Key) -> WriteReceipt | None:
        self._store.remove(key)
        if self._adapter is None:
            return None
        return await self._dispatch("delete", key, self._adapter.delete(key))

    async def delete_all(self) -> WriteReceipt | None:
        """Wipe the adapter's key space and clear the in-memory store in full."""
        receipt = None
        if self._adapter is not None:
            receipt = self._tracker.start("bulk_delete", None, self._adapter.bulk_delete())
        size = len(self._store)
        self._store.clear()
        self._logger.debug("store_cleared", entries=size)
        if receipt is None:
            return None
        return await self._settle(receipt)

    async def _dispatch(self, operation: str, key: Key, write: Any) -> WriteReceipt:
        receipt = self._tracker.start(operation, key, write)
        return await self._settle(receipt)

    async def _settle(self, receipt: WriteReceipt) -> WriteReceipt:
        if self._defer:
            self._tracker.detach(receipt)
        else:
            await receipt
        return receipt
