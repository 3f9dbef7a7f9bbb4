"""
Stitch-count scaling and size-bucket selection.

All functions are pure.
"""

from __future__ import annotations

import math

from pupstitch.schemas.customization import clamp_multiplier
from pupstitch.schemas.preset import SizeKey
from pupstitch.tables.registry import get_tables

__all__ = ["clamp_multiplier", "scale_stitch_count", "size_key_for"]


def scale_stitch_count(count: int, multiplier: float) -> int:
    """Scale a stitch count, rounding halves up (so 6 x 0.75 -> 5)."""
    return int(math.floor(count * multiplier + 0.5))


def size_key_for(multiplier: float) -> SizeKey:
    """Size bucket for a size multiplier: <=0.85 small, >=1.3 large, else medium."""
    return get_tables().size_key_for(multiplier)
