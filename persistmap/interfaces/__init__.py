"""Public interface definitions for backing stores.

Persistent storage is reached exclusively through the abstract base class
defined in this package.  Concrete adapters implement it and are handed to a
map at construction time.

    Interface       →  Concrete implementations (in persistmap/providers/)
    ─────────────────────────────────────────────────────────────
    IStoreAdapter   →  MemoryStoreAdapter, SQLiteStoreAdapter
"""

from persistmap.interfaces.store_adapter import IStoreAdapter, Key

__all__ = ["IStoreAdapter", "Key"]
