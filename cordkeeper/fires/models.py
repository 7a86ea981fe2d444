"""Fire session and log record models."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from ..errors import SessionStateError
from ..settings.zones import system_zone

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..season.ratios import SizeRatioTable


def local_now() -> datetime:
    """Return the current time in the system zone, daylight saving rules included."""

    return datetime.now(system_zone())


def _new_id() -> str:
    return uuid.uuid4().hex


class LogSize(str, Enum):
    """Size classification of a split of firewood."""

    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"

    @staticmethod
    def from_value(value: "LogSize | str | None") -> "LogSize":
        """Return the matching size, defaulting to :attr:`MEDIUM`."""

        if isinstance(value, LogSize):
            return value
        if value is None:
            return LogSize.MEDIUM
        try:
            return LogSize(str(value))
        except ValueError:
            normalized = str(value).strip().lower()
            for size in LogSize:
                if normalized in (size.value.lower(), size.abbreviation.lower()):
                    return size
            return LogSize.MEDIUM

    @property
    def abbreviation(self) -> str:
        return self.value[0]


@dataclass
class LogRecord:
    """A number of pieces of one size logged at a single instant."""

    size: LogSize
    quantity: int = 1
    timestamp: datetime = field(default_factory=local_now)
    record_id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        self.size = LogSize.from_value(self.size)
        if isinstance(self.quantity, bool) or int(self.quantity) != self.quantity:
            raise ValueError("quantity must be a whole number")
        self.quantity = int(self.quantity)
        if self.quantity <= 0:
            raise ValueError("quantity must be positive")


@dataclass
class FireSession:
    """One contiguous period of burning wood.

    The session owns its log records outright; removing the session from the
    fire log removes its records with it.
    """

    start_time: datetime = field(default_factory=local_now)
    end_time: datetime | None = None
    notes: str | None = None
    logs: list[LogRecord] = field(default_factory=list)
    session_id: str = field(default_factory=_new_id)

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    def add_logs(
        self, size: LogSize | str, quantity: int = 1, *, timestamp: datetime | None = None
    ) -> LogRecord:
        """Append a log record to an active session and return it."""

        if not self.is_active:
            raise SessionStateError("cannot add logs to a fire that has ended")
        record = LogRecord(
            size=LogSize.from_value(size),
            quantity=quantity,
            timestamp=timestamp or local_now(),
        )
        self.logs.append(record)
        return record

    def end(self, at: datetime | None = None) -> None:
        """Close the session. The end time can only be set once."""

        if self.end_time is not None:
            raise SessionStateError(f"fire {self.session_id} has already ended")
        end_time = at or local_now()
        if end_time < self.start_time:
            raise ValueError("end time must not be earlier than the start time")
        self.end_time = end_time

    @property
    def duration(self) -> timedelta | None:
        """Elapsed time of a finished session, ``None`` while still burning.

        Stored sessions that somehow end before they start report zero.
        """

        if self.end_time is None:
            return None
        return max(self.end_time - self.start_time, timedelta(0))

    @property
    def formatted_duration(self) -> str:
        duration = self.duration
        if duration is None:
            return "In progress"
        seconds = int(duration.total_seconds())
        hours, remainder = divmod(seconds, 3600)
        minutes = remainder // 60
        if hours > 0:
            return f"{hours}h {minutes}m"
        return f"{minutes}m"

    def log_count(self, size: LogSize) -> int:
        return sum(record.quantity for record in self.logs if record.size is size)

    @property
    def total_small(self) -> int:
        return self.log_count(LogSize.SMALL)

    @property
    def total_medium(self) -> int:
        return self.log_count(LogSize.MEDIUM)

    @property
    def total_large(self) -> int:
        return self.log_count(LogSize.LARGE)

    @property
    def total_logs(self) -> int:
        return sum(record.quantity for record in self.logs)

    def total_units(self, ratios: "SizeRatioTable") -> float:
        """Weighted units burned in this session."""

        return sum(record.quantity * ratios.ratio(record.size) for record in self.logs)

    def cord_equivalent(self, ratios: "SizeRatioTable", units_per_cord: float) -> float:
        from ..season.cords import to_cords

        return to_cords(self.total_units(ratios), units_per_cord)

    @property
    def log_summary(self) -> str:
        parts = [
            f"{count}{size.abbreviation}"
            for size, count in (
                (LogSize.SMALL, self.total_small),
                (LogSize.MEDIUM, self.total_medium),
                (LogSize.LARGE, self.total_large),
            )
            if count > 0
        ]
        return " • ".join(parts) if parts else "No logs"


__all__ = ["FireSession", "LogRecord", "LogSize", "local_now"]
