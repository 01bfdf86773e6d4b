"""Abstract base class for persistent backing stores.

A :class:`~persistmap.core.persistent_map.PersistentMap` reaches persistent
storage only through this contract.  Implementations may use SQLite, Redis,
a document database or anything else; the map never knows which.  The
adapter pattern allows the backing store to be swapped without touching the
synchronization logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from persistmap.core.store import CoreStore

Key = Union[str, int]


class IStoreAdapter(ABC):
    """Contract for persistent key-value backing stores.

    All data operations are async to allow network-backed stores without
    blocking the event loop.  Two capability flags shape how the map drives
    the adapter:

    * :meth:`manages_expiry` -- the store expires keys itself, so a miss is a
      trustworthy answer and may be cached locally as "confirmed absent".
    * :meth:`defers_writes` -- writes are fire-and-forget; the map does not
      wait for them before returning to its caller.
    """

    @abstractmethod
    async def init(self, store: CoreStore) -> None:
        """Bind the adapter to the map's in-memory store.

        Called exactly once, from :meth:`PersistentMap.initialize`, before any
        other operation.  Implementations open connections and create tables
        here.

        Parameters
        ----------
        store:
            The in-memory store the adapter now backs.  Adapters must not
            mutate it; the map's controllers own every write to it.
        """

    @abstractmethod
    async def fetch_all(self) -> Mapping[Key, Any]:
        """Return the adapter's entire persisted key space.

        Used for eager loading at initialization and by
        :meth:`PersistentMap.fetch_everything`.  Expired keys must be left out.
        """

    @abstractmethod
    async def fetch(self, key: Key) -> Any | None:
        """Look up a single key.

        Returns
        -------
        Any or None
            The stored value, or ``None`` if the key is absent or expired.
        """

    @abstractmethod
    async def set(self, key: Key, value: Any, ttl: float | None = None) -> None:
        """Persist *value* under *key*.

        Parameters
        ----------
        key:
            The key to store under.
        value:
            The value to persist.  Never ``None``.
        ttl:
            Advisory time-to-live in seconds.  ``None`` means no expiry.
        """

    @abstractmethod
    async def delete(self, key: Key) -> None:
        """Remove *key*.  A no-op if the key does not exist."""

    @abstractmethod
    async def bulk_delete(self) -> None:
        """Remove every key the adapter persists."""

    def manages_expiry(self) -> bool:
        """Return ``True`` if the store expires keys on its own."""
        return False

    def defers_writes(self) -> bool:
        """Return ``True`` if writes should not be awaited by the caller."""
        return True

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"sqlite"`` for logs and errors."""
