"""History listings for completed fires."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from .models import FireSession

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..settings.config import SeasonConfig


@dataclass(frozen=True)
class MonthGroup:
    """Completed fires that started in one calendar month."""

    month: date
    fires: tuple[FireSession, ...]

    @property
    def label(self) -> str:
        return self.month.strftime("%B %Y")


def group_by_month(sessions: Iterable[FireSession]) -> list[MonthGroup]:
    """Group completed sessions by start month, most recent month first.

    Open sessions are left out; fires within a month are newest first.
    """

    grouped: dict[date, list[FireSession]] = defaultdict(list)
    for session in sessions:
        if session.is_active:
            continue
        key = date(session.start_time.year, session.start_time.month, 1)
        grouped[key].append(session)
    return [
        MonthGroup(
            month=key,
            fires=tuple(sorted(fires, key=lambda fire: fire.start_time, reverse=True)),
        )
        for key, fires in sorted(grouped.items(), key=lambda item: item[0], reverse=True)
    ]


def fire_detail(session: FireSession, config: "SeasonConfig") -> dict[str, str]:
    """Human readable figures describing a single fire."""

    ratios = config.ratio_table()
    ended = session.end_time.strftime("%b %d, %Y %H:%M") if session.end_time else "In progress"
    return {
        "Started": session.start_time.strftime("%b %d, %Y %H:%M"),
        "Ended": ended,
        "Duration": session.formatted_duration,
        "Small": str(session.total_small),
        "Medium": str(session.total_medium),
        "Large": str(session.total_large),
        "Units": f"{session.total_units(ratios):.1f}",
        "Cord Equivalent": f"{session.cord_equivalent(ratios, config.units_per_cord):.3f}",
    }


__all__ = ["MonthGroup", "fire_detail", "group_by_month"]
