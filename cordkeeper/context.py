"""Application-scoped context shared by every consumer of the core."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from loguru import logger

from .fires.history import MonthGroup, group_by_month
from .fires.models import FireSession, local_now
from .season.statistics import SeasonSnapshot, SeasonStatisticsCache, season_sessions
from .settings.config import SeasonConfig
from .store import persistence
from .store.fire_log import FireLog

Clock = Callable[[], datetime]
SettingsListener = Callable[[SeasonConfig], None]


@dataclass
class AppContext:
    """Owns the single settings instance, the fire log and the statistics cache.

    Build it once at startup with :meth:`bootstrap` (or :meth:`in_memory`) and
    hand the same instance to every consumer.
    """

    settings: SeasonConfig
    fire_log: FireLog
    engine: persistence.ConnectionLike | None = None
    clock: Clock = local_now
    statistics: SeasonStatisticsCache = field(default_factory=SeasonStatisticsCache)
    _settings_listeners: list[SettingsListener] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.fire_log.subscribe(self.statistics.invalidate)

    @classmethod
    def bootstrap(
        cls, db_path: os.PathLike[str] | str, *, clock: Clock = local_now
    ) -> "AppContext":
        """Open the database, load or create the settings row and every fire."""

        engine = persistence.create_engine(db_path)
        persistence.init_storage(engine)
        settings = persistence.get_or_create_settings(engine)
        fire_log = FireLog.from_storage(engine)
        logger.info(f"Cordkeeper context ready (database {db_path})")
        return cls(settings=settings, fire_log=fire_log, engine=engine, clock=clock)

    @classmethod
    def in_memory(
        cls,
        settings: SeasonConfig | None = None,
        sessions: tuple[FireSession, ...] = (),
        *,
        clock: Clock = local_now,
    ) -> "AppContext":
        return cls(settings=settings or SeasonConfig(), fire_log=FireLog(sessions), clock=clock)

    def close(self) -> None:
        if self.engine is not None:
            self.engine.close()
            self.engine = None

    # Settings ----------------------------------------------------------
    def on_settings_changed(self, listener: SettingsListener) -> None:
        self._settings_listeners.append(listener)

    def update_settings(self, **changes: Any) -> SeasonConfig:
        """Apply validated changes to the shared settings instance and persist them.

        All changes are validated before any is applied.
        """

        merged = {**self.settings.model_dump(), **changes}
        SeasonConfig.model_validate(merged)
        for name, value in changes.items():
            setattr(self.settings, name, value)
        if self.engine is not None:
            persistence.store_settings(self.engine, self.settings)
        self.statistics.invalidate()
        logger.info(f"Settings updated: {sorted(changes)}")
        for listener in list(self._settings_listeners):
            listener(self.settings)
        return self.settings

    def complete_onboarding(self, *, has_goal: bool) -> None:
        self.settings.complete_onboarding(has_goal=has_goal)
        if self.engine is not None:
            persistence.store_settings(self.engine, self.settings)
        self.statistics.invalidate()
        for listener in list(self._settings_listeners):
            listener(self.settings)

    # Statistics --------------------------------------------------------
    def now(self) -> datetime:
        return self.clock()

    def snapshot(self) -> SeasonSnapshot:
        return self.statistics.snapshot(
            self.fire_log.sessions,
            self.settings,
            self.now(),
            revision=self.fire_log.revision,
        )

    def season_fires(self) -> tuple[FireSession, ...]:
        start = self.settings.current_season_start(self.now())
        return season_sessions(self.fire_log.sessions, start)

    def history(self) -> list[MonthGroup]:
        return group_by_month(self.fire_log.sessions)

    def reset_season(self) -> int:
        """Delete every fire of the current season. Returns the number removed."""

        fires = self.season_fires()
        removed = self.fire_log.delete_sessions(fires)
        logger.info(f"Reset season: removed {removed} fires")
        return removed


__all__ = ["AppContext", "Clock"]
