"""Factories that build several named maps at once.

Each name gets its own adapter instance (``adapter_factory(name=name,
**adapter_options)``) and its own map; maps never share mutable state even
when their adapters point at the same database file.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from persistmap.config.loader import load_config
from persistmap.core.persistent_map import PersistentMap
from persistmap.interfaces.store_adapter import IStoreAdapter
from persistmap.models.options import MapOptions
from persistmap.providers.sqlite.sqlite_adapter import SQLiteStoreAdapter
from persistmap.utils.errors import InvalidArgumentError
from persistmap.utils.logging import get_logger

logger = get_logger(__name__)


async def multi(
    names: Sequence[str],
    adapter_factory: Callable[..., IStoreAdapter],
    adapter_options: dict[str, Any] | None = None,
    fetch_all: bool | None = None,
    options: MapOptions | None = None,
) -> dict[str, PersistentMap]:
    """Create and initialize one persistent map per name.

    Example::

        maps = await multi(["settings", "tags"], SQLiteStoreAdapter, {"db_path": "bot.db"})
        await maps["settings"].set("prefix", "!")

    Args:
        names: Map names; each becomes the adapter's ``name`` argument.
        adapter_factory: Callable (usually an adapter class) returning an IStoreAdapter.
        adapter_options: Extra keyword arguments for every adapter.
        fetch_all: Overrides ``options.fetch_all`` when given.
        options: Map options shared by every map.

    Returns:
        Maps keyed by name, in the order the names were given.
    """
    if isinstance(names, str) or not names:
        raise InvalidArgumentError('"names" argument must be a non-empty list of string names.')
    if adapter_factory is None:
        raise InvalidArgumentError("Second argument must be a valid adapter factory.")

    overrides: dict[str, Any] = {}
    if fetch_all is not None:
        overrides["fetch_all"] = fetch_all

    maps: dict[str, PersistentMap] = {}
    for name in names:
        adapter = adapter_factory(name=name, **(adapter_options or {}))
        maps[name] = await PersistentMap.create(adapter=adapter, options=options, **overrides)
    logger.info("maps_created", names=list(names))
    return maps


async def multi_from_config(
    names: Sequence[str],
    config_path: str = "config/persistmap.yaml",
) -> dict[str, PersistentMap]:
    """Create SQLite-backed maps using options from :func:`load_config`."""
    config = load_config(config_path)
    return await multi(
        names,
        SQLiteStoreAdapter,
        {"db_path": config["sqlite"]["db_path"]},
        options=MapOptions.from_config(config),
    )
