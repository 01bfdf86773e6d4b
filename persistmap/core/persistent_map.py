"""PersistentMap -- an ordered in-memory map kept in sync with a backing store.

The map composes a private :class:`~persistmap.core.store.CoreStore` with two
controllers, and those controllers are the only code allowed to reach the
adapter:

    caller ──► PersistentMap ──► WriteThroughController ──► IStoreAdapter
                    │                    │
                    │                    └──► CoreStore (sync, first)
                    └──────────► LazyLoadController ──► IStoreAdapter
                                         └──► CoreStore (on hit)

Reads (``get``, ``has``, ``lookup``, iteration) are synchronous and never
consult the adapter.  Writes update memory immediately and forward to the
adapter either fire-and-forget or awaited, per the adapter's
``defers_writes()`` flag.  Fetches always await the adapter.

Usage::

    adapter = SQLiteStoreAdapter("data/settings.db", name="settings")
    settings = await PersistentMap.create(adapter=adapter, fetch_all=False)
    await settings.set("prefix", "!")
    prefix = await settings.fetch("prefix")

Without an adapter the map is a plain in-memory container and never issues a
remote call.  The map is not thread-safe; drive one instance from one event
loop.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from persistmap.core.collection import CollectionMixin
from persistmap.core.lazy_load import LazyLoadController
from persistmap.core.receipts import WriteReceipt, WriteTracker
from persistmap.core.store import CoreStore
from persistmap.core.ttl import validate_ttl
from persistmap.core.write_through import WriteThroughController
from persistmap.interfaces.store_adapter import IStoreAdapter, Key
from persistmap.models.lookup import Lookup
from persistmap.models.options import MapOptions
from persistmap.utils.errors import AdapterError, ConfigurationError, InvalidArgumentError
from persistmap.utils.logging import get_logger


class PersistentMap(CollectionMixin):
    """Write-through, lazily populated map in front of an optional adapter.

    Parameters
    ----------
    entries:
        Initial contents, as a mapping or an iterable of ``(key, value)``
        pairs.  Loaded into memory only; they are not written to the adapter.
    adapter:
        Backing store.  Its presence switches the map into persistent mode.
        Bound once, at :meth:`initialize`, and never replaced.
    options:
        Construction options; keyword arguments (``fetch_all``, ``ttl``,
        ``on_write_error``, ``failed_write_limit``) override individual fields.
    """

    def __init__(
        self,
        entries: Mapping[Key, Any] | Iterable[tuple[Key, Any]] | None = None,
        adapter: IStoreAdapter | None = None,
        options: MapOptions | None = None,
        **overrides: Any,
    ) -> None:
        unknown = sorted(set(overrides) - set(MapOptions.model_fields))
        if unknown:
            raise InvalidArgumentError(f"Unknown map options: {', '.join(unknown)}")
        if "ttl" in overrides:
            validate_ttl(overrides["ttl"])
        base = (options or MapOptions()).model_dump()
        try:
            opts = MapOptions.model_validate({**base, **overrides})
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid map options: {exc}") from exc
        self._fetch_all = opts.fetch_all
        self._ttl = validate_ttl(opts.ttl)
        self._store = CoreStore(entries)
        self._adapter = adapter
        self._bound = False
        self._ready = adapter is None
        self._logger: structlog.BoundLogger = get_logger(__name__)

        self._tracker: WriteTracker | None = None
        self._loader: LazyLoadController | None = None
        if adapter is not None:
            self._tracker = WriteTracker(
                adapter.get_provider_name(), opts.on_write_error, max_failed=opts.failed_write_limit
            )
            self._loader = LazyLoadController(self._store, adapter)
        self._writer = WriteThroughController(self._store, adapter, self._tracker, self._ttl)

    @classmethod
    async def create(
        cls,
        entries: Mapping[Key, Any] | Iterable[tuple[Key, Any]] | None = None,
        adapter: IStoreAdapter | None = None,
        options: MapOptions | None = None,
        **overrides: Any,
    ) -> PersistentMap:
        """Construct and initialize a map in one step."""
        instance = cls(entries, adapter=adapter, options=options, **overrides)
        return await instance.initialize()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> PersistentMap:
        """Bind the adapter and, in eager mode, bulk-load its key space.

        Must be awaited once before any persistent operation.  A no-op for
        in-memory maps.  The map only becomes usable once the eager load has
        succeeded; if it fails, awaiting ``initialize()`` again retries the
        load without binding the adapter a second time.
        """
        if self._adapter is None:
            return self
        provider = self._adapter.get_provider_name()
        if self._ready:
            raise ConfigurationError("Map is already initialized", provider_name=provider)
        if not self._bound:
            try:
                await self._adapter.init(self._store)
            except Exception as exc:
                raise AdapterError(f"adapter init failed: {exc}", provider_name=provider) from exc
            self._bound = True
            self._logger.info(
                "adapter_bound",
                provider=provider,
                fetch_all=self._fetch_all,
                defers_writes=self._writer.defers_writes,
                manages_expiry=self._adapter.manages_expiry(),
            )
        if self._fetch_all:
            await self._loader.fetch_everything()
        self._ready = True
        return self

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def persistent(self) -> bool:
        return self._adapter is not None

    @property
    def adapter(self) -> IStoreAdapter | None:
        return self._adapter

    @property
    def fetch_all(self) -> bool:
        return self._fetch_all

    @property
    def ttl(self) -> float | None:
        return self._ttl

    @property
    def size(self) -> int:
        return len(self._store)

    @property
    def last_write(self) -> WriteReceipt | None:
        """Receipt of the most recent adapter write, if any."""
        return self._tracker.last if self._tracker else None

    @property
    def pending_writes(self) -> frozenset[WriteReceipt]:
        return self._tracker.pending if self._tracker else frozenset()

    @property
    def failed_writes(self) -> list[WriteReceipt]:
        """Most recent deferred writes that failed, oldest first.

        Only the last ``failed_write_limit`` failures are retained.
        """
        return self._tracker.failed if self._tracker else []

    def take_failed_writes(self) -> list[WriteReceipt]:
        """Return the retained failed writes and forget them."""
        return self._tracker.drain_failed() if self._tracker else []

    # ------------------------------------------------------------------
    # Local reads
    # ------------------------------------------------------------------

    def get(self, key: Key) -> Any | None:
        """Return the local value for *key*, or ``None``.  Never consults the adapter."""
        return self._store.get(key)

    def has(self, key: Key) -> bool:
        """Whether *key* is known locally, as a value or as confirmed absent."""
        return self._store.has(key)

    def lookup(self, key: Key) -> Lookup:
        """Three-state view of *key*: hit, confirmed absent, or unknown."""
        return self._store.lookup(key)

    def keys(self) -> list[Key]:
        return list(self._store)

    def values(self) -> list[Any]:
        return [self._store.get(key) for key in self._store]

    def items(self) -> list[tuple[Key, Any]]:
        return [(key, self._store.get(key)) for key in self._store]

    def __getitem__(self, key: Key) -> Any:
        if not self._store.has(key):
            raise KeyError(key)
        return self._store.get(key)

    def __contains__(self, key: object) -> bool:
        return self._store.has(key)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Key]:
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def set(self, key: Key, value: Any, ttl: float | None = None) -> PersistentMap:
        """Store *value* under *key* and return the map for chaining.

        The value is visible through :meth:`get` as soon as this is called.
        Writing ``None`` is silently ignored.  *ttl* (seconds) overrides the
        map's default expiry hint for this write.
        """
        self._require_ready()
        await self._writer.set(key, value, ttl)
        return self

    async def delete(self, key: Key) -> None:
        """Remove *key* locally and from the adapter."""
        self._require_ready()
        await self._writer.delete(key)

    async def delete_all(self) -> None:
        """Remove every key from the adapter and clear the map."""
        self._require_ready()
        await self._writer.delete_all()

    async def clear(self) -> None:
        """Alias of :meth:`delete_all`."""
        await self.delete_all()

    async def flush(self) -> list[WriteReceipt]:
        """Wait for all deferred adapter writes; return the receipts that failed."""
        if self._tracker is None:
            return []
        return await self._tracker.flush()

    # ------------------------------------------------------------------
    # Lazy loads
    # ------------------------------------------------------------------

    async def fetch(self, key_or_keys: Key | list[Key] | tuple[Key, ...]) -> Any | None:
        """Force-load one key, or a list of keys, from the adapter.

        A single key returns its value (or ``None``).  A list or tuple is
        handed to :meth:`fetch_many` and returns ``None``.
        """
        loader = self._require_loader()
        if isinstance(key_or_keys, (list, tuple)):
            await loader.fetch_many(key_or_keys)
            return None
        return await loader.fetch(key_or_keys)

    async def fetch_many(self, keys: Iterable[Key]) -> None:
        """Load *keys* sequentially; only hits are written to the map.

        Unlike :meth:`fetch`, misses are never recorded as confirmed absent.
        """
        await self._require_loader().fetch_many(keys)

    async def fetch_everything(self) -> PersistentMap:
        """Reload every key the adapter holds into the map."""
        await self._require_loader().fetch_everything()
        return self

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_ready(self) -> None:
        if not self._ready:
            raise ConfigurationError(
                "Map has an adapter but initialize() was never awaited",
                provider_name=self._adapter.get_provider_name(),
            )

    def _require_loader(self) -> LazyLoadController:
        if self._loader is None:
            raise ConfigurationError("Map has no adapter to fetch from")
        self._require_ready()
        return self._loader

    def _hits(self) -> Iterator[tuple[Key, Any]]:
        return self._store.hits()

    def _spawn(self, entries: Iterable[tuple[Key, Any]]) -> PersistentMap:
        return PersistentMap(entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PersistentMap):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        provider = self._adapter.get_provider_name() if self._adapter else None
        return f"PersistentMap(size={len(self._store)}, provider={provider!r})"
