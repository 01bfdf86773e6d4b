"""TTL policy.

TTL is advisory: the map never tracks expiry timestamps or evicts on a timer.
It only threads an expiry hint down to the adapter on writes, and consults the
adapter's ``manages_expiry`` flag when deciding whether a miss may be cached
locally as "confirmed absent".
"""

from __future__ import annotations

from persistmap.interfaces.store_adapter import IStoreAdapter
from persistmap.utils.errors import InvalidArgumentError


def validate_ttl(ttl: float | None) -> float | None:
    """Return *ttl* unchanged, rejecting anything but ``None`` or a positive number."""
    if ttl is None:
        return None
    if isinstance(ttl, bool) or not isinstance(ttl, (int, float)):
        raise InvalidArgumentError(f"TTL must be a number of seconds, got {ttl!r}")
    if ttl <= 0:
        raise InvalidArgumentError(f"TTL must be greater than 0, got {ttl!r}")
    return ttl


def resolve_ttl(explicit: float | None, default: float | None) -> float | None:
    """Pick the expiry hint for one write: explicit value, then map default, then none."""
    if explicit is not None:
        return validate_ttl(explicit)
    return default


def records_absence(adapter: IStoreAdapter) -> bool:
    """Whether a single-key miss from *adapter* may be cached as confirmed absent."""
    return adapter.manages_expiry()
