"""Synchronization core.

    - store.py          -- CoreStore, the ordered in-memory container
    - write_through.py  -- set / delete / delete_all against store and adapter
    - lazy_load.py      -- single-key, batch and bulk loads from the adapter
    - ttl.py            -- expiry-hint resolution and absence-caching policy
    - receipts.py       -- WriteReceipt / WriteTracker for adapter writes
    - collection.py     -- read-only iteration helpers
    - persistent_map.py -- PersistentMap, the public façade
"""

from persistmap.core.persistent_map import PersistentMap
from persistmap.core.receipts import WriteReceipt
from persistmap.core.store import CoreStore

__all__ = ["CoreStore", "PersistentMap", "WriteReceipt"]
