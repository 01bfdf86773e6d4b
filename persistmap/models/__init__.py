"""persistmap value models.

    - lookup.py  -- Provenance enum, the confirmed-absent marker and the
                    three-state Lookup result
    - options.py -- MapOptions, the construction-time options model
"""

from __future__ import annotations

from persistmap.models.lookup import CONFIRMED_ABSENT, Lookup, Provenance
from persistmap.models.options import MapOptions

__all__ = [
    "CONFIRMED_ABSENT",
    "Lookup",
    "MapOptions",
    "Provenance",
]
