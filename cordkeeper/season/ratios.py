"""Size-to-unit weighting used to normalise log counts."""

from __future__ import annotations

from dataclasses import dataclass

from ..fires.models import LogSize

DEFAULT_SMALL_RATIO = 0.25
DEFAULT_MEDIUM_RATIO = 1.0
DEFAULT_LARGE_RATIO = 2.0


@dataclass(frozen=True)
class SizeRatioTable:
    """Weights converting a count of pieces of each size into units."""

    small: float = DEFAULT_SMALL_RATIO
    medium: float = DEFAULT_MEDIUM_RATIO
    large: float = DEFAULT_LARGE_RATIO

    def ratio(self, size: LogSize | str | None) -> float:
        """Return the weight for ``size``; unknown sizes count as medium."""

        resolved = LogSize.from_value(size)
        if resolved is LogSize.SMALL:
            return self.small
        if resolved is LogSize.LARGE:
            return self.large
        return self.medium

    def as_mapping(self) -> dict[LogSize, float]:
        return {size: self.ratio(size) for size in LogSize}


__all__ = [
    "DEFAULT_LARGE_RATIO",
    "DEFAULT_MEDIUM_RATIO",
    "DEFAULT_SMALL_RATIO",
    "SizeRatioTable",
]
