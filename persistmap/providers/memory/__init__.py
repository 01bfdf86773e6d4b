"""In-memory backing store.

MemoryStoreAdapter is a TLRUCache-backed store -- fast but not durable and not
shared across processes.  Swap in SQLiteStoreAdapter (or any other
IStoreAdapter) for persistence without changing calling code.
"""

from persistmap.providers.memory.memory_adapter import MemoryStoreAdapter

__all__ = ["MemoryStoreAdapter"]
