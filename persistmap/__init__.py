"""persistmap -- a write-through, lazily populated map in front of a pluggable store.

Public entry points:

- :class:`PersistentMap` -- the map itself
- :class:`IStoreAdapter` -- contract a backing store implements
- :class:`MemoryStoreAdapter`, :class:`SQLiteStoreAdapter` -- bundled stores
- :func:`multi` -- build several named maps sharing one adapter type
"""

from persistmap.core.persistent_map import PersistentMap
from persistmap.core.receipts import WriteReceipt
from persistmap.factory import multi, multi_from_config
from persistmap.interfaces.store_adapter import IStoreAdapter
from persistmap.models.lookup import CONFIRMED_ABSENT, Lookup, Provenance
from persistmap.models.options import MapOptions
from persistmap.providers.memory.memory_adapter import MemoryStoreAdapter
from persistmap.providers.sqlite.sqlite_adapter import SQLiteStoreAdapter
from persistmap.utils.errors import (
    AdapterError,
    ConfigurationError,
    InvalidArgumentError,
    PersistMapError,
)

__version__ = "0.1.0"

__all__ = [
    "CONFIRMED_ABSENT",
    "AdapterError",
    "ConfigurationError",
    "IStoreAdapter",
    "InvalidArgumentError",
    "Lookup",
    "MapOptions",
    "MemoryStoreAdapter",
    "PersistMapError",
    "PersistentMap",
    "Provenance",
    "SQLiteStoreAdapter",
    "WriteReceipt",
    "multi",
    "multi_from_config",
]
