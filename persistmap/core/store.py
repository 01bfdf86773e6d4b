"""In-memory ordered key-value store.

Backed by a plain ``dict``: iteration follows insertion order, new keys are
appended and overwriting an existing key keeps its original position.  The
store never evicts.  Nothing here blocks, suspends or talks to an adapter.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from persistmap.interfaces.store_adapter import Key
from persistmap.models.lookup import CONFIRMED_ABSENT, Lookup


class CoreStore:
    """Ordered, unique-key container held entirely in memory."""

    def __init__(self, entries: Mapping[Key, Any] | Iterable[tuple[Key, Any]] | None = None) -> None:
        self._data: dict[Key, Any] = {}
        if entries is not None:
            self.load(entries)

    def put(self, key: Key, value: Any) -> None:
        self._data[key] = value

    def mark_absent(self, key: Key) -> None:
        self._data[key] = CONFIRMED_ABSENT

    def load(self, entries: Mapping[Key, Any] | Iterable[tuple[Key, Any]]) -> int:
        """Insert every pair from *entries* in order; returns how many were written.

        Pairs whose value is ``None`` are skipped.
        """
        pairs = entries.items() if isinstance(entries, Mapping) else entries
        count = 0
        for key, value in pairs:
            if value is None:
                continue
            self._data[key] = value
            count += 1
        return count

    def get(self, key: Key) -> Any | None:
        value = self._data.get(key)
        if value is CONFIRMED_ABSENT:
            return None
        return value

    def lookup(self, key: Key) -> Lookup:
        if key not in self._data:
            return Lookup.unknown()
        value = self._data[key]
        if value is CONFIRMED_ABSENT:
            return Lookup.confirmed_absent()
        return Lookup.present(value)

    def has(self, key: Key) -> bool:
        return key in self._data

    def remove(self, key: Key) -> bool:
        """Drop *key*; returns whether it was present."""
        if key not in self._data:
            return False
        del self._data[key]
        return True

    def clear(self) -> None:
        self._data.clear()

    def hits(self) -> Iterator[tuple[Key, Any]]:
        """Yield ``(key, value)`` for every entry that holds a real value."""
        for key, value in self._data.items():
            if value is not CONFIRMED_ABSENT:
                yield key, value

    def snapshot(self) -> dict[Key, Any]:
        """Return a shallow copy of the raw contents, markers included."""
        return dict(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Key]:
        return iter(self._data)

    def __repr__(self) -> str:
        return f"CoreStore({self._data!r})"
