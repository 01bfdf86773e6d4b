"""Construction-time options for a PersistentMap."""

from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from persistmap.config.settings import Settings


class MapOptions(BaseModel):
    """Options recognised when building a map.

    The adapter itself is passed separately; its presence is what switches a
    map into persistent mode.
    """

    model_config = ConfigDict(frozen=True)

    # Eager bulk load at initialization versus lazy per-key loading.
    fetch_all: bool = True
    # Default expiry hint in seconds for writes that don't pass one. None = disabled.
    ttl: float | None = Field(default=None, gt=0)
    # Receives the receipt of every deferred write that fails.
    on_write_error: Callable[[Any], None] | None = None
    # How many failed deferred writes the map retains for inspection.
    failed_write_limit: int = Field(default=100, ge=1)

    @classmethod
    def from_settings(cls, settings: Settings) -> MapOptions:
        return cls(fetch_all=settings.fetch_all, ttl=settings.default_ttl)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> MapOptions:
        """Build options from the ``map`` section of :func:`load_config` output."""
        section = config.get("map") or {}
        return cls(
            fetch_all=section.get("fetch_all", True),
            ttl=section.get("ttl"),
            failed_write_limit=section.get("failed_write_limit", 100),
        )
