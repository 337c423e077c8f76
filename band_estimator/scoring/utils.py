"""
Band Arithmetic Utilities
band_estimator/scoring/utils.py

Provides precision-safe decimal math for band calculations. All bands live
on the closed interval [0, 9] in steps of 0.5.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

BAND_MIN = Decimal("0")
BAND_MAX = Decimal("9")
HALF_STEPS = Decimal("2")


def to_decimal(value: float) -> Decimal:
    """Convert float to Decimal via its shortest repr (avoids binary noise)."""
    return Decimal(str(value))


def clamp(
    value: Decimal,
    min_val: Decimal = BAND_MIN,
    max_val: Decimal = BAND_MAX,
) -> Decimal:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def clamp_round(value: float) -> float:
    """
    Clamp a raw band to [0, 9] and round it to the nearest 0.5.

    Half-steps round up: 6.25 -> 6.5, 6.75 -> 7.0. NaN is treated as 0.
    """
    if value is None or math.isnan(value):
        return 0.0
    if math.isinf(value):
        return float(BAND_MAX) if value > 0 else float(BAND_MIN)
    clamped = clamp(to_decimal(value))
    doubled = (clamped * HALF_STEPS).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return float(doubled / HALF_STEPS)


def cap(value: float, ceiling: float) -> float:
    """Lower a band to ceiling if it exceeds it."""
    return min(value, ceiling)


def mean_band(values: Iterable[float]) -> float:
    """Arithmetic mean of bands, clamp-rounded. Returns 0.0 for no values."""
    decimals = [to_decimal(v) for v in values]
    if not decimals:
        return 0.0
    mean = sum(decimals, Decimal("0")) / Decimal(len(decimals))
    return clamp_round(float(mean))
