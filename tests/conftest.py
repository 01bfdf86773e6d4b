"""Shared pytest fixtures for the persistmap test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import pytest

from persistmap.core.store import CoreStore
from persistmap.interfaces.store_adapter import IStoreAdapter, Key


class RecordingAdapter(IStoreAdapter):
    """Dict-backed adapter that records every call it receives.

    ``fail_on`` names operations that should raise; ``gate`` (when set)
    holds writes until the event is set, which lets tests observe the map
    while an adapter write is still in flight.
    """

    def __init__(
        self,
        data: Mapping[Key, Any] | None = None,
        *,
        expiry: bool = False,
        defer: bool = True,
        name: str = "fake",
    ) -> None:
        self.data: dict[Key, Any] = dict(data or {})
        self.calls: list[tuple[Any, ...]] = []
        self.fail_on: set[str] = set()
        self.gate: asyncio.Event | None = None
        self.bound_store: CoreStore | None = None
        self._expiry = expiry
        self._defer = defer
        self._name = name

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise RuntimeError(f"{operation} exploded")

    async def _hold(self) -> None:
        if self.gate is not None:
            await self.gate.wait()

    async def init(self, store: CoreStore) -> None:
        self.calls.append(("init",))
        self._check("init")
        self.bound_store = store

    async def fetch_all(self) -> Mapping[Key, Any]:
        self.calls.append(("fetch_all",))
        self._check("fetch_all")
        return dict(self.data)

    async def fetch(self, key: Key) -> Any | None:
        self.calls.append(("fetch", key))
        self._check("fetch")
        return self.data.get(key)

    async def set(self, key: Key, value: Any, ttl: float | None = None) -> None:
        self.calls.append(("set", key, value, ttl))
        await self._hold()
        self._check("set")
        self.data[key] = value

    async def delete(self, key: Key) -> None:
        self.calls.append(("delete", key))
        await self._hold()
        self._check("delete")
        self.data.pop(key, None)

    async def bulk_delete(self) -> None:
        self.calls.append(("bulk_delete",))
        await self._hold()
        self._check("bulk_delete")
        self.data.clear()

    def manages_expiry(self) -> bool:
        return self._expiry

    def defers_writes(self) -> bool:
        return self._defer

    def get_provider_name(self) -> str:
        return self._name

    def operations(self, name: str) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def adapter_factory() -> type[RecordingAdapter]:
    """The RecordingAdapter class, for tests that need custom flags or data."""
    return RecordingAdapter


@pytest.fixture
def adapter() -> RecordingAdapter:
    """Deferred-write adapter without expiry management, pre-loaded with two keys."""
    return RecordingAdapter({"a": 1, "b": 2})


@pytest.fixture
def expiring_adapter() -> RecordingAdapter:
    """Adapter that manages its own expiry."""
    return RecordingAdapter({"a": 1, "b": 2}, expiry=True)


@pytest.fixture
def awaited_adapter() -> RecordingAdapter:
    """Adapter whose writes must be awaited."""
    return RecordingAdapter({"a": 1, "b": 2}, defer=False)
