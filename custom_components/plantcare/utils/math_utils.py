# File: utils/math_utils.py
"""Math and calculation utilities for PlantCare.

Pure Python math functions with ZERO Home Assistant dependencies.

Functions:
    - clamp: Bound a value to a range
    - clamp_percent: Bound and round a 0-100 gauge value
    - progress_fraction: Progress toward a target as a 0.0-1.0 float
    - average_interval_days: Mean gap between consecutive timestamps
"""

from __future__ import annotations

from datetime import datetime
import logging

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

PERCENT_MIN = 0
PERCENT_MAX = 100
SECONDS_PER_DAY = 86400


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
        clamp(50, 0, 100) → 50
    """
    return max(min_val, min(value, max_val))


def clamp_percent(value: float) -> int:
    """Clamp a gauge value (health, hydration) to an integer in [0, 100]."""
    return int(round(clamp(value, PERCENT_MIN, PERCENT_MAX)))


def progress_fraction(current: float, target: float) -> float:
    """Return progress toward ``target`` as a float in [0.0, 1.0].

    Examples:
        progress_fraction(3, 10) → 0.3
        progress_fraction(12, 10) → 1.0
        progress_fraction(5, 0) → 0.0  # Division by zero protection
    """
    if target <= 0:
        return 0.0
    return min(1.0, max(0.0, current / target))


def average_interval_days(timestamps: list[datetime]) -> float | None:
    """Average gap in days between consecutive timestamps.

    Timestamps are sorted before measuring. Returns None with fewer than two.

    Example:
        [Jan 1, Jan 5, Jan 11] → 5.0
    """
    if len(timestamps) < 2:
        return None
    ordered = sorted(timestamps)
    gaps = [
        (later - earlier).total_seconds() / SECONDS_PER_DAY
        for earlier, later in zip(ordered, ordered[1:])
    ]
    return sum(gaps) / len(gaps)
