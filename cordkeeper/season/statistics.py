"""Season statistics snapshot and its cache."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from loguru import logger

from ..errors import MultipleActiveSessionsError
from ..fires.models import FireSession, LogSize
from .aggregate import aggregate_sessions
from .cords import progress_fraction, to_cords

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..settings.config import SeasonConfig


@dataclass(frozen=True)
class SeasonSnapshot:
    """Derived figures for the current season."""

    season_start: datetime
    season_fires: tuple[FireSession, ...]
    active_session: FireSession | None
    total_logs: int
    per_size_counts: Mapping[LogSize, int]
    weighted_units: float
    cords_burned: float
    progress_fraction: float | None = None
    season_goal: float | None = None

    @property
    def season_fire_count(self) -> int:
        return len(self.season_fires)

    @property
    def has_goal(self) -> bool:
        return self.progress_fraction is not None

    def count(self, size: LogSize) -> int:
        return self.per_size_counts.get(size, 0)


def season_sessions(
    sessions: Iterable[FireSession], season_start: datetime
) -> tuple[FireSession, ...]:
    """Sessions that started inside the season beginning at ``season_start``."""

    return tuple(session for session in sessions if session.start_time >= season_start)


def find_active_session(sessions: Sequence[FireSession]) -> FireSession | None:
    """Return the single open session, raising if more than one is open."""

    active = [session for session in sessions if session.is_active]
    if len(active) > 1:
        raise MultipleActiveSessionsError(active)
    return active[0] if active else None


def compute_snapshot(
    sessions: Iterable[FireSession], config: "SeasonConfig", now: datetime
) -> SeasonSnapshot:
    """Build a fresh snapshot of ``sessions`` for the season containing ``now``."""

    season_start = config.current_season_start(now)
    fires = season_sessions(sessions, season_start)
    active = find_active_session(fires)
    totals = aggregate_sessions(fires, config.ratio_table())
    cords = to_cords(totals.weighted_units, config.units_per_cord)
    return SeasonSnapshot(
        season_start=season_start,
        season_fires=fires,
        active_session=active,
        total_logs=totals.total_logs,
        per_size_counts=totals.as_mapping(),
        weighted_units=totals.weighted_units,
        cords_burned=cords,
        progress_fraction=progress_fraction(cords, config.season_goal),
        season_goal=config.season_goal,
    )


@dataclass
class SeasonStatisticsCache:
    """Holds the most recent snapshot until one of its inputs changes.

    A snapshot is reused only while the record revision, the statistics
    relevant settings, the season start and the content of the sessions all
    match the values it was computed from. The content fingerprint catches
    sessions edited in place without a store notification. Stores call
    :meth:`invalidate` on every change.
    """

    _snapshot: SeasonSnapshot | None = field(default=None, init=False)
    _key: tuple[Any, ...] | None = field(default=None, init=False)
    refresh_count: int = field(default=0, init=False)

    @property
    def current(self) -> SeasonSnapshot | None:
        return self._snapshot

    def invalidate(self, *_: object) -> None:
        """Drop the cached snapshot. Accepts and ignores notification arguments."""

        if self._snapshot is not None:
            logger.debug("Season statistics invalidated")
        self._snapshot = None
        self._key = None

    def refresh(
        self,
        sessions: Iterable[FireSession],
        config: "SeasonConfig",
        now: datetime,
        *,
        revision: int | None = None,
    ) -> SeasonSnapshot:
        """Recompute unconditionally and store the result."""

        sessions = tuple(sessions)
        try:
            snapshot = compute_snapshot(sessions, config, now)
        except MultipleActiveSessionsError as exc:
            self.invalidate()
            logger.warning(f"Season statistics refused: {exc}")
            raise
        self._snapshot = snapshot
        self._key = self._make_key(sessions, config, snapshot.season_start, revision)
        self.refresh_count += 1
        return snapshot

    def snapshot(
        self,
        sessions: Iterable[FireSession],
        config: "SeasonConfig",
        now: datetime,
        *,
        revision: int | None = None,
    ) -> SeasonSnapshot:
        """Return the cached snapshot if still valid, otherwise recompute."""

        sessions = tuple(sessions)
        key = self._make_key(sessions, config, config.current_season_start(now), revision)
        if self._snapshot is not None and key == self._key:
            return self._snapshot
        return self.refresh(sessions, config, now, revision=revision)

    @staticmethod
    def _make_key(
        sessions: Sequence[FireSession],
        config: "SeasonConfig",
        season_start: datetime,
        revision: int | None,
    ) -> tuple[Any, ...]:
        return (revision, config.statistics_key(), season_start, session_fingerprint(sessions))


def session_fingerprint(sessions: Iterable[FireSession]) -> tuple[Any, ...]:
    """Everything about ``sessions`` that a snapshot is computed from."""

    return tuple(
        (
            session.session_id,
            session.start_time,
            session.end_time,
            tuple((record.record_id, record.size, record.quantity) for record in session.logs),
        )
        for session in sessions
    )


__all__ = [
    "SeasonSnapshot",
    "SeasonStatisticsCache",
    "compute_snapshot",
    "find_active_session",
    "season_sessions",
    "session_fingerprint",
]
