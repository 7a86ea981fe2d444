"""Season window calculation.

A season is the twelve month window that starts on a configured
``(month, day)`` anchor. The functions here are pure; :class:`SeasonStartMemo`
is the optional caller-side memo used by :class:`~cordkeeper.settings.config.SeasonConfig`.
"""

from __future__ import annotations

import calendar
from datetime import datetime, tzinfo


def clamped_day(year: int, month: int, day: int) -> int:
    """Clamp ``day`` into the days actually present in ``year``/``month``."""

    if not 1 <= month <= 12:
        raise ValueError("month must be between 1 and 12")
    days_in_month = calendar.monthrange(year, month)[1]
    return max(1, min(day, days_in_month))


def season_boundary(year: int, month: int, day: int, tz: tzinfo | None = None) -> datetime:
    """Midnight at the start of the anchor day in ``year``."""

    return datetime(year, month, clamped_day(year, month, day), tzinfo=tz)


def _in_zone(now: datetime, tz: tzinfo | None) -> datetime:
    if tz is None or now.tzinfo is None:
        return now
    return now.astimezone(tz)


def active_season_start(month: int, day: int, now: datetime, tz: tzinfo | None = None) -> datetime:
    """Return the start of the season containing ``now``.

    Boundaries are midnight in ``tz`` when given, otherwise in the zone of
    ``now``. A fixed-offset ``now`` therefore needs ``tz`` for boundaries on the
    other side of a daylight saving change to land on local midnight. The
    anchor instant itself belongs to the new season.
    """

    now = _in_zone(now, tz)
    candidate = season_boundary(now.year, month, day, now.tzinfo)
    if now < candidate:
        return season_boundary(now.year - 1, month, day, now.tzinfo)
    return candidate


def season_end(month: int, day: int, season_start: datetime) -> datetime:
    """Exclusive end of the season that began at ``season_start``."""

    return season_boundary(season_start.year + 1, month, day, season_start.tzinfo)


def season_label(season_start: datetime) -> str:
    """Short label such as ``"2025-26"`` for the season starting at ``season_start``."""

    end_year = season_start.year + 1
    return f"{season_start.year}-{str(end_year)[-2:]}"


class SeasonStartMemo:
    """Memo of season boundaries keyed by every input they depend on.

    The key is ``(month, day, year, zone)`` with the year taken in that zone.
    For each key both candidate boundaries (this year and the previous one)
    are stored and the choice between them is made on every lookup, so
    crossing the anchor later in the same calendar year is observed
    immediately.
    """

    def __init__(self) -> None:
        self._key: tuple[int, int, int, tzinfo | None] | None = None
        self._boundaries: tuple[datetime, datetime] | None = None
        self.misses = 0

    def lookup(self, month: int, day: int, now: datetime, tz: tzinfo | None = None) -> datetime:
        now = _in_zone(now, tz)
        key = (month, day, now.year, now.tzinfo)
        if self._key != key or self._boundaries is None:
            self._boundaries = (
                season_boundary(now.year, month, day, now.tzinfo),
                season_boundary(now.year - 1, month, day, now.tzinfo),
            )
            self._key = key
            self.misses += 1
        this_year, previous_year = self._boundaries
        return previous_year if now < this_year else this_year

    def clear(self) -> None:
        self._key = None
        self._boundaries = None


__all__ = [
    "SeasonStartMemo",
    "active_season_start",
    "clamped_day",
    "season_boundary",
    "season_end",
    "season_label",
]
