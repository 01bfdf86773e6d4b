"""Read-only collection helpers for PersistentMap.

Pure iteration over the entries that hold a value; confirmed-absent markers
are skipped.  None of these touch the adapter, and none of them mutate the
map they are called on.  Callbacks receive ``(value, key, map)``.
"""

from __future__ import annotations

import random as _random
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from persistmap.interfaces.store_adapter import Key
from persistmap.utils.errors import InvalidArgumentError

if TYPE_CHECKING:
    from persistmap.core.persistent_map import PersistentMap

_UNSET: Any = object()


def _prop(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name, _UNSET)
    return getattr(item, name, _UNSET)


def _validate_count(count: Any) -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise TypeError("The count must be an integer.")
    if count < 1:
        raise InvalidArgumentError("The count must be an integer greater than 0.")
    return count


class CollectionMixin:
    """Iteration utilities shared by every map.

    Subclasses provide :meth:`_hits` and :meth:`_spawn`.
    """

    def _hits(self) -> Iterator[tuple[Key, Any]]:
        raise NotImplementedError

    def _spawn(self, entries: Iterable[tuple[Key, Any]]) -> PersistentMap:
        raise NotImplementedError

    def array(self) -> list[Any]:
        """Values in insertion order."""
        return [value for _, value in self._hits()]

    def key_array(self) -> list[Key]:
        """Keys in insertion order."""
        return [key for key, _ in self._hits()]

    def random(self, count: int | None = None) -> Any:
        """One random value, or a list of up to *count* distinct random values."""
        return self._sample(self.array(), count)

    def random_key(self, count: int | None = None) -> Any:
        """One random key, or a list of up to *count* distinct random keys."""
        return self._sample(self.key_array(), count)

    @staticmethod
    def _sample(pool: list[Any], count: int | None) -> Any:
        if count is None:
            return _random.choice(pool) if pool else None
        count = _validate_count(count)
        return _random.sample(pool, min(count, len(pool)))

    def find_all(self, prop: str, value: Any = _UNSET) -> list[Any]:
        """Every value whose *prop* equals *value*."""
        if not isinstance(prop, str):
            raise TypeError("Key must be a string.")
        if value is _UNSET:
            raise InvalidArgumentError("Value must be specified.")
        return [item for _, item in self._hits() if _prop(item, prop) == value]

    def find(self, prop_or_fn: str | Callable[..., Any], value: Any = _UNSET) -> Any | None:
        """First value matching a property/value pair or a predicate, else ``None``."""
        match = self._first(prop_or_fn, value)
        return match[1] if match else None

    def find_key(self, prop_or_fn: str | Callable[..., Any], value: Any = _UNSET) -> Key | None:
        """Key of the first value matching a property/value pair or a predicate."""
        match = self._first(prop_or_fn, value)
        return match[0] if match else None

    def _first(self, prop_or_fn: str | Callable[..., Any], value: Any) -> tuple[Key, Any] | None:
        if isinstance(prop_or_fn, str):
            if value is _UNSET:
                raise InvalidArgumentError("Value must be specified.")
            for key, item in self._hits():
                if _prop(item, prop_or_fn) == value:
                    return key, item
            return None
        if callable(prop_or_fn):
            for key, item in self._hits():
                if prop_or_fn(item, key, self):
                    return key, item
            return None
        raise InvalidArgumentError("First argument must be a property string or a function.")

    def exists(self, prop: str, value: Any) -> bool:
        return self._first(prop, value) is not None

    def filter(self, fn: Callable[..., Any]) -> PersistentMap:
        """Matching entries as a new in-memory map."""
        return self._spawn((key, item) for key, item in self._hits() if fn(item, key, self))

    def filter_array(self, fn: Callable[..., Any]) -> list[Any]:
        return [item for key, item in self._hits() if fn(item, key, self)]

    def map(self, fn: Callable[..., Any]) -> list[Any]:
        return [fn(item, key, self) for key, item in self._hits()]

    def some(self, fn: Callable[..., Any]) -> bool:
        return any(fn(item, key, self) for key, item in self._hits())

    def every(self, fn: Callable[..., Any]) -> bool:
        return all(fn(item, key, self) for key, item in self._hits())

    def reduce(self, fn: Callable[..., Any], initial: Any = _UNSET) -> Any:
        """Fold values with ``fn(accumulator, value, key, map)``.

        Without *initial*, the first value seeds the accumulator; an empty
        map then reduces to ``None``.
        """
        hits = self._hits()
        if initial is _UNSET:
            first = next(hits, None)
            if first is None:
                return None
            accumulator = first[1]
        else:
            accumulator = initial
        for key, item in hits:
            accumulator = fn(accumulator, item, key, self)
        return accumulator

    def clone(self) -> PersistentMap:
        """Shallow in-memory copy; the copy has no adapter bound."""
        return self._spawn(self._hits())

    def concat(self, *others: CollectionMixin) -> PersistentMap:
        """New in-memory map with this map's entries, then each of *others* in turn."""
        combined = dict(self._hits())
        for other in others:
            combined.update(other._hits())
        return self._spawn(combined.items())

    def equals(self, other: Any) -> bool:
        """Whether *other* holds exactly the same key/value pairs."""
        if other is None:
            return False
        if other is self:
            return True
        if not isinstance(other, CollectionMixin):
            return False
        mine = dict(self._hits())
        theirs = dict(other._hits())
        return mine == theirs
