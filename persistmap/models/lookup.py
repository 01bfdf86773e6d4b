"""Provenance model for locally cached keys.

A key in a :class:`~persistmap.core.persistent_map.PersistentMap` is in one
of three states:

    UNKNOWN           never looked up locally (may still exist remotely)
    HIT               value present locally, from a write or a load
    CONFIRMED_ABSENT  a single-key fetch found nothing in a backing store
                      that manages its own expiry

``None`` is never used to mean "confirmed absent" inside the store; the
:data:`CONFIRMED_ABSENT` marker below is stored instead and
:meth:`PersistentMap.lookup` reports it as a :class:`Lookup`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Final

from pydantic import BaseModel, ConfigDict


class Provenance(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Where a locally visible key came from."""

    UNKNOWN = "UNKNOWN"
    HIT = "HIT"
    CONFIRMED_ABSENT = "CONFIRMED_ABSENT"


class _ConfirmedAbsent:
    """Singleton marker stored in place of a value for confirmed-absent keys."""

    _instance: _ConfirmedAbsent | None = None

    def __new__(cls) -> _ConfirmedAbsent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CONFIRMED_ABSENT"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _ConfirmedAbsent:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _ConfirmedAbsent:
        return self


CONFIRMED_ABSENT: Final = _ConfirmedAbsent()


class Lookup(BaseModel):
    """Three-state result of a local key lookup.

    ``value`` is only meaningful when ``state`` is :attr:`Provenance.HIT`.
    """

    model_config = ConfigDict(frozen=True)

    state: Provenance
    value: Any = None

    @classmethod
    def present(cls, value: Any) -> Lookup:
        return cls(state=Provenance.HIT, value=value)

    @classmethod
    def confirmed_absent(cls) -> Lookup:
        return cls(state=Provenance.CONFIRMED_ABSENT)

    @classmethod
    def unknown(cls) -> Lookup:
        return cls(state=Provenance.UNKNOWN)

    @property
    def is_hit(self) -> bool:
        return self.state is Provenance.HIT
