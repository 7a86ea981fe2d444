"""Single-pass reduction of log records into per-size and weighted totals."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from itertools import chain

from ..fires.models import FireSession, LogRecord, LogSize
from .ratios import SizeRatioTable


@dataclass(frozen=True)
class UnitTotals:
    """Aggregated counts for a set of log records."""

    small: int = 0
    medium: int = 0
    large: int = 0
    weighted_units: float = 0.0

    @property
    def total_logs(self) -> int:
        return self.small + self.medium + self.large

    def count(self, size: LogSize) -> int:
        if size is LogSize.SMALL:
            return self.small
        if size is LogSize.LARGE:
            return self.large
        return self.medium

    def as_mapping(self) -> dict[LogSize, int]:
        return {size: self.count(size) for size in LogSize}


def aggregate(records: Iterable[LogRecord], ratios: SizeRatioTable) -> UnitTotals:
    """Sum quantities per size and weighted units in one pass over ``records``."""

    counts = {LogSize.SMALL: 0, LogSize.MEDIUM: 0, LogSize.LARGE: 0}
    weighted = 0.0
    for record in records:
        size = LogSize.from_value(record.size)
        counts[size] += record.quantity
        weighted += record.quantity * ratios.ratio(size)
    return UnitTotals(
        small=counts[LogSize.SMALL],
        medium=counts[LogSize.MEDIUM],
        large=counts[LogSize.LARGE],
        weighted_units=weighted,
    )


def aggregate_sessions(sessions: Iterable[FireSession], ratios: SizeRatioTable) -> UnitTotals:
    """Aggregate the combined records of ``sessions``."""

    return aggregate(chain.from_iterable(session.logs for session in sessions), ratios)


__all__ = ["UnitTotals", "aggregate", "aggregate_sessions"]
