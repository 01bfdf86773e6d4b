"""In-memory backing store using cachetools.TLRUCache.

Useful for tests, development, and sharing one namespace between several
maps inside a single process.  Each entry carries its own expiry, so the
adapter manages expiry itself and misses are reported to the map as
trustworthy.
"""

from __future__ import annotations

import copy
import math
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog
from cachetools import TLRUCache

from persistmap.interfaces.store_adapter import IStoreAdapter, Key

if TYPE_CHECKING:
    from persistmap.core.store import CoreStore

logger = structlog.get_logger(logger_name=__name__)


def _expires_at(_key: Key, item: tuple[Any, float | None], now: float) -> float:
    ttl = item[1]
    return now + ttl if ttl else math.inf


class MemoryStoreAdapter(IStoreAdapter):
    """Process-local backing store with per-item TTL.

    Parameters
    ----------
    name:
        Namespace label used in logs and error messages.
    max_size:
        Maximum number of entries before the entry closest to expiry is
        evicted.
    defer_writes:
        Whether the map should treat writes as fire-and-forget.
    timer:
        Clock used for expiry; injectable for tests.
    """

    def __init__(
        self,
        name: str = "memory",
        max_size: int = 10_000,
        defer_writes: bool = True,
        timer: Any = time.monotonic,
    ) -> None:
        self._name = name
        self._defer_writes = defer_writes
        self._cache: TLRUCache[Key, tuple[Any, float | None]] = TLRUCache(
            maxsize=max_size, ttu=_expires_at, timer=timer
        )

    # ------------------------------------------------------------------
    # IStoreAdapter implementation
    # ------------------------------------------------------------------

    async def init(self, store: CoreStore) -> None:
        self._cache.expire()
        logger.debug("memory_adapter_bound", name=self._name, persisted=len(self._cache))

    async def fetch_all(self) -> Mapping[Key, Any]:
        self._cache.expire()
        return {key: copy.deepcopy(item[0]) for key, item in self._cache.items()}

    async def fetch(self, key: Key) -> Any | None:
        item = self._cache.get(key)
        if item is None:
            logger.debug("memory_miss", name=self._name, key=key)
            return None
        return copy.deepcopy(item[0])

    async def set(self, key: Key, value: Any, ttl: float | None = None) -> None:
        self._cache[key] = (copy.deepcopy(value), ttl)

    async def delete(self, key: Key) -> None:
        self._cache.pop(key, None)

    async def bulk_delete(self) -> None:
        self._cache.clear()
        logger.debug("memory_cleared", name=self._name)

    def manages_expiry(self) -> bool:
        return True

    def defers_writes(self) -> bool:
        return self._defer_writes

    def get_provider_name(self) -> str:
        return self._name
