"""
ⒸAngelaMos | 2026
report/rating.py
"""
from __future__ import annotations

import math
from collections import Counter
from typing import TYPE_CHECKING

from infosphere.models import Rating

if TYPE_CHECKING:
    from collections.abc import Iterable

    from infosphere.core.config import Thresholds
    from infosphere.models import ModuleMetrics


def rate(s: float | None, thresholds: Thresholds | None) -> Rating:
    """
    Classify a sphericity value against the good and warning thresholds
    """
    if thresholds is None:
        return Rating.UNKNOWN
    if s is None or not math.isfinite(s):
        return Rating.UNKNOWN
    if s > thresholds.good:
        return Rating.GOOD
    if s > thresholds.warning:
        return Rating.WARNING
    return Rating.COLLAPSE


def count_ratings(
    results: Iterable[ModuleMetrics],
    thresholds: Thresholds | None,
) -> Counter[Rating]:
    """
    Number of modules per rating
    """
    return Counter(rate(m.s, thresholds) for m in results)


def format_sphericity(s: float) -> str:
    """
    Three decimals, switching to exponent notation for very large values
    """
    if abs(s) >= 1e21:
        return f"{s:.3e}"
    return f"{s:.3f}"


def format_number(value: float) -> str:
    return f"{value:g}"
