"""
sis_lib/volume.py

Percent <-> device level conversion.

Devices express level in tenths of dB between -1000 (-100 dB) and +120
(+12 dB). Callers work in 0-100 percent on a log curve normalized so that
0% is -1000 and 100% is +120; unity gain lands near 76%.
"""

from __future__ import annotations

import math
from typing import Union

from .validation import parse_level

CURVE_K = 11.0
MIN_TENTHS_DB = -1000
MAX_TENTHS_DB = 120
TENTHS_DB_RANGE = MAX_TENTHS_DB - MIN_TENTHS_DB

Number = Union[int, str]


def _round_half_away(value: float) -> int:
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def _clamp(value, low, high):
    return max(low, min(high, value))


def to_device_units(percent: Number) -> int:
    """Convert a 0-100 percent into tenths of dB."""
    pct = _clamp(parse_level(percent), 0, 100)
    normalized = math.log10(1.0 + pct / CURVE_K) / math.log10(1.0 + 100.0 / CURVE_K)
    normalized = _clamp(normalized, 0.0, 1.0)
    tenths = _round_half_away(MIN_TENTHS_DB + normalized * TENTHS_DB_RANGE)
    return _clamp(tenths, MIN_TENTHS_DB, MAX_TENTHS_DB)


def to_percent(tenths_db: Number) -> int:
    """Convert tenths of dB back into a 0-100 percent."""
    tenths = _clamp(parse_level(tenths_db), MIN_TENTHS_DB, MAX_TENTHS_DB)
    normalized = (tenths - MIN_TENTHS_DB) / TENTHS_DB_RANGE
    base = 1.0 + 100.0 / CURVE_K
    percent = _round_half_away(CURVE_K * (math.pow(base, normalized) - 1.0))
    return _clamp(percent, 0, 100)


__all__ = ["MAX_TENTHS_DB", "MIN_TENTHS_DB", "to_device_units", "to_percent"]
