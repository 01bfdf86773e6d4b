"""Concrete IStoreAdapter implementations.

- **memory** -- MemoryStoreAdapter, a process-local TLRUCache with per-item TTL
- **sqlite** -- SQLiteStoreAdapter, one aiosqlite table per map
"""

from persistmap.providers.memory import MemoryStoreAdapter
from persistmap.providers.sqlite import SQLiteStoreAdapter

__all__ = ["MemoryStoreAdapter", "SQLiteStoreAdapter"]
