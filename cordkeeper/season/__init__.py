"""Season window, unit aggregation and cord statistics."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - imported only for type checkers
    from .ratios import SizeRatioTable
    from .window import active_season_start
    from .window import clamped_day
    from .window import SeasonStartMemo
    from .aggregate import UnitTotals
    from .aggregate import aggregate
    from .cords import to_cords
    from .cords import progress_fraction
    from .statistics import SeasonSnapshot
    from .statistics import SeasonStatisticsCache

__all__ = [
    "SeasonSnapshot",
    "SeasonStartMemo",
    "SeasonStatisticsCache",
    "SizeRatioTable",
    "UnitTotals",
    "active_season_start",
    "aggregate",
    "clamped_day",
    "progress_fraction",
    "to_cords",
]

_EXPORTS = {
    "SizeRatioTable": "cordkeeper.season.ratios",
    "active_season_start": "cordkeeper.season.window",
    "clamped_day": "cordkeeper.season.window",
    "SeasonStartMemo": "cordkeeper.season.window",
    "UnitTotals": "cordkeeper.season.aggregate",
    "aggregate": "cordkeeper.season.aggregate",
    "to_cords": "cordkeeper.season.cords",
    "progress_fraction": "cordkeeper.season.cords",
    "SeasonSnapshot": "cordkeeper.season.statistics",
    "SeasonStatisticsCache": "cordkeeper.season.statistics",
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module = import_module(_EXPORTS[name])
        value = getattr(module, name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted({*globals(), *__all__})
