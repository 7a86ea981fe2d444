"""Conversion of weighted units into cords and goal progress."""

from __future__ import annotations

import math


def to_cords(weighted_units: float, units_per_cord: float) -> float:
    """Return the number of cords represented by ``weighted_units``.

    A non-positive or non-finite ``units_per_cord`` yields ``0.0`` so an
    out-of-range setting can never break a statistics display.
    """

    if not math.isfinite(units_per_cord) or units_per_cord <= 0:
        return 0.0
    if not math.isfinite(weighted_units) or weighted_units <= 0:
        return 0.0
    return weighted_units / units_per_cord


def progress_fraction(cords_burned: float, season_goal: float | None) -> float | None:
    """Fraction of the season goal reached, capped at ``1.0``.

    Returns ``None`` when no usable goal is configured; "no goal" is distinct
    from zero progress.
    """

    if season_goal is None or not math.isfinite(season_goal) or season_goal <= 0:
        return None
    return min(max(cords_burned, 0.0) / season_goal, 1.0)


__all__ = ["progress_fraction", "to_cords"]
