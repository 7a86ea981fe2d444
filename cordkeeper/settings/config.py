"""Validated settings model shared by every statistics calculation."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from ..season.ratios import (
    DEFAULT_LARGE_RATIO,
    DEFAULT_MEDIUM_RATIO,
    DEFAULT_SMALL_RATIO,
    SizeRatioTable,
)
from ..season.window import SeasonStartMemo, season_end, season_label
from .zones import zone_from_name

DEFAULT_UNITS_PER_CORD = 400.0
DEFAULT_SEASON_GOAL = 3.0

# Fields whose change invalidates a statistics snapshot.
STATISTICS_FIELDS = (
    "units_per_cord",
    "small_ratio",
    "medium_ratio",
    "large_ratio",
    "season_goal",
    "season_start_month",
    "season_start_day",
    "timezone",
)


class SeasonConfig(BaseModel):
    """Application settings for cord calibration and the season window.

    ``units_per_cord`` is user editable and is deliberately not bounded here;
    cord conversion substitutes zero for a non-positive divisor.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    units_per_cord: float = Field(default=DEFAULT_UNITS_PER_CORD)
    small_ratio: float = Field(default=DEFAULT_SMALL_RATIO, gt=0.0)
    medium_ratio: float = Field(default=DEFAULT_MEDIUM_RATIO, gt=0.0)
    large_ratio: float = Field(default=DEFAULT_LARGE_RATIO, gt=0.0)
    season_goal: float | None = Field(default=DEFAULT_SEASON_GOAL, gt=0.0)
    season_start_month: int = Field(default=9, ge=1, le=12)
    season_start_day: int = Field(default=1, ge=1, le=31)
    has_completed_onboarding: bool = False
    # IANA name; None uses the zone of the supplied time.
    timezone: str | None = None

    _season_start_memo: SeasonStartMemo = PrivateAttr(default_factory=SeasonStartMemo)

    @field_validator("units_per_cord", "small_ratio", "medium_ratio", "large_ratio")
    @classmethod
    def _coerce_float(cls, value: float) -> float:
        return float(value)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        if value is not None:
            zone_from_name(value)
        return value

    def zone(self) -> tzinfo | None:
        return zone_from_name(self.timezone) if self.timezone else None

    def ratio_table(self) -> SizeRatioTable:
        return SizeRatioTable(
            small=self.small_ratio,
            medium=self.medium_ratio,
            large=self.large_ratio,
        )

    def current_season_start(self, now: datetime) -> datetime:
        """Start of the season containing ``now``, memoised per anchor, year and zone.

        With :attr:`timezone` set the boundary is local midnight in that zone
        whatever offset ``now`` carries.
        """

        return self._season_start_memo.lookup(
            self.season_start_month, self.season_start_day, now, self.zone()
        )

    def current_season_end(self, now: datetime) -> datetime:
        start = self.current_season_start(now)
        return season_end(self.season_start_month, self.season_start_day, start)

    def season_name(self, now: datetime) -> str:
        return season_label(self.current_season_start(now))

    def statistics_key(self) -> tuple[Any, ...]:
        """Every settings value a statistics snapshot depends on."""

        return tuple(getattr(self, name) for name in STATISTICS_FIELDS)

    def complete_onboarding(self, *, has_goal: bool) -> None:
        if not has_goal:
            self.season_goal = None
        self.has_completed_onboarding = True


__all__ = [
    "DEFAULT_SEASON_GOAL",
    "DEFAULT_UNITS_PER_CORD",
    "STATISTICS_FIELDS",
    "SeasonConfig",
]
