"""Integration tests: PersistentMap on top of the bundled adapters."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from persistmap.core.persistent_map import PersistentMap
from persistmap.models.lookup import Provenance
from persistmap.providers.memory.memory_adapter import MemoryStoreAdapter
from persistmap.providers.sqlite.sqlite_adapter import SQLiteStoreAdapter
from persistmap.utils.errors import InvalidArgumentError


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


# ======================================================================
# MemoryStoreAdapter
# ======================================================================


class TestMemoryAdapter:
    @pytest.mark.asyncio
    async def test_two_maps_share_one_namespace(self) -> None:
        backing = MemoryStoreAdapter(name="shared")
        writer = await PersistentMap.create(adapter=backing)
        await writer.set("greeting", {"text": "hi"})
        await writer.flush()

        reader = await PersistentMap.create(adapter=backing)
        assert reader.get("greeting") == {"text": "hi"}

    @pytest.mark.asyncio
    async def test_values_are_copied(self) -> None:
        backing = MemoryStoreAdapter()
        pmap = await PersistentMap.create(adapter=backing, fetch_all=False)
        value = {"tags": ["a"]}
        await pmap.set("k", value)
        await pmap.flush()
        value["tags"].append("b")
        assert await backing.fetch("k") == {"tags": ["a"]}

    @pytest.mark.asyncio
    async def test_per_item_expiry(self) -> None:
        clock = FakeClock()
        backing = MemoryStoreAdapter(timer=clock)
        pmap = await PersistentMap.create(adapter=backing, fetch_all=False)
        await pmap.set("short", 1, ttl=10)
        await pmap.set("forever", 2)
        await pmap.flush()

        clock.now += 11
        assert await backing.fetch("short") is None
        assert await backing.fetch("forever") == 2
        assert dict(await backing.fetch_all()) == {"forever": 2}

    @pytest.mark.asyncio
    async def test_expired_key_is_confirmed_absent(self) -> None:
        clock = FakeClock()
        backing = MemoryStoreAdapter(timer=clock)
        pmap = await PersistentMap.create(adapter=backing, fetch_all=False)
        await pmap.set("session", "abc", ttl=5)
        await pmap.flush()
        clock.now += 6

        assert await pmap.fetch("session") is None
        assert pmap.lookup("session").state is Provenance.CONFIRMED_ABSENT

    @pytest.mark.asyncio
    async def test_delete_all(self) -> None:
        backing = MemoryStoreAdapter(defer_writes=False)
        pmap = await PersistentMap.create(adapter=backing)
        await pmap.set("a", 1)
        await pmap.delete_all()
        assert dict(await backing.fetch_all()) == {}


# ======================================================================
# SQLiteStoreAdapter
# ======================================================================


class TestSQLiteAdapter:
    @pytest.mark.asyncio
    async def test_round_trip_across_instances(self, tmp_path: Path) -> None:
        db = tmp_path / "store.db"
        first = await PersistentMap.create(
            adapter=SQLiteStoreAdapter(db, name="guilds", defer_writes=False)
        )
        await first.set("g1", {"prefix": "!", "admins": [1, 2]})
        await first.set(42, "int key")

        second = await PersistentMap.create(adapter=SQLiteStoreAdapter(db, name="guilds"))
        assert second.items() == [("g1", {"prefix": "!", "admins": [1, 2]}), (42, "int key")]

    @pytest.mark.asyncio
    async def test_overwrite_keeps_row_order(self, tmp_path: Path) -> None:
        backing = SQLiteStoreAdapter(tmp_path / "store.db", defer_writes=False)
        pmap = await PersistentMap.create(adapter=backing)
        await pmap.set("a", 1)
        await pmap.set("b", 2)
        await pmap.set("a", 3)
        assert list((await backing.fetch_all()).items()) == [("a", 3), ("b", 2)]

    @pytest.mark.asyncio
    async def test_tables_are_isolated(self, tmp_path: Path) -> None:
        db = tmp_path / "store.db"
        tags = await PersistentMap.create(adapter=SQLiteStoreAdapter(db, name="tags", defer_writes=False))
        await tags.set("t", 1)
        other = await PersistentMap.create(adapter=SQLiteStoreAdapter(db, name="other"))
        assert len(other) == 0

    @pytest.mark.asyncio
    async def test_lazy_fetch_and_confirmed_absent(self, tmp_path: Path) -> None:
        db = tmp_path / "store.db"
        writer = await PersistentMap.create(adapter=SQLiteStoreAdapter(db, defer_writes=False))
        await writer.set("present", [1, 2, 3])

        reader = await PersistentMap.create(adapter=SQLiteStoreAdapter(db), fetch_all=False)
        assert len(reader) == 0
        assert await reader.fetch("present") == [1, 2, 3]
        assert await reader.fetch("missing") is None
        assert reader.lookup("missing").state is Provenance.CONFIRMED_ABSENT

    @pytest.mark.asyncio
    async def test_delete_and_bulk_delete(self, tmp_path: Path) -> None:
        backing = SQLiteStoreAdapter(tmp_path / "store.db", defer_writes=False)
        pmap = await PersistentMap.create(adapter=backing)
        await pmap.set("a", 1)
        await pmap.set("b", 2)
        await pmap.delete("a")
        assert await backing.fetch("a") is None
        await pmap.delete_all()
        assert dict(await backing.fetch_all()) == {}

    @pytest.mark.asyncio
    async def test_expired_rows_are_hidden(self, tmp_path: Path) -> None:
        backing = SQLiteStoreAdapter(tmp_path / "store.db", defer_writes=False)
        pmap = await PersistentMap.create(adapter=backing, fetch_all=False)
        await pmap.set("short", "x", ttl=0.05)
        await pmap.set("long", "y", ttl=3600)
        await asyncio.sleep(0.1)
        assert await backing.fetch("short") is None
        assert dict(await backing.fetch_all()) == {"long": "y"}

    def test_rejects_unsafe_table_name(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidArgumentError):
            SQLiteStoreAdapter(tmp_path / "store.db", name="x; DROP TABLE y")
