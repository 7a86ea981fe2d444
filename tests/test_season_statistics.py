from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from cordkeeper.errors import DataIntegrityError, MultipleActiveSessionsError
from cordkeeper.fires.models import FireSession, LogRecord, LogSize
from cordkeeper.season.statistics import SeasonStatisticsCache, compute_snapshot
from cordkeeper.settings.config import SeasonConfig

TZ = timezone.utc
NOW = datetime(2026, 10, 17, 20, tzinfo=TZ)


def _fire(start: datetime, *logs: tuple[LogSize, int], ended: bool = True) -> FireSession:
    fire = FireSession(
        start_time=start,
        logs=[LogRecord(size, quantity, start) for size, quantity in logs],
    )
    if ended:
        fire.end(start + timedelta(hours=3))
    return fire


def _sessions() -> list[FireSession]:
    return [
        _fire(datetime(2026, 9, 20, 18, tzinfo=TZ), (LogSize.SMALL, 4), (LogSize.MEDIUM, 1), (LogSize.LARGE, 1)),
        _fire(datetime(2026, 10, 10, 18, tzinfo=TZ), (LogSize.MEDIUM, 10)),
        # Previous season, excluded.
        _fire(datetime(2026, 3, 2, 18, tzinfo=TZ), (LogSize.LARGE, 50)),
    ]


def test_snapshot_figures() -> None:
    snapshot = compute_snapshot(_sessions(), SeasonConfig(), NOW)

    assert snapshot.season_start == datetime(2026, 9, 1, tzinfo=TZ)
    assert snapshot.season_fire_count == 2
    assert snapshot.active_session is None
    assert snapshot.total_logs == 16
    assert snapshot.count(LogSize.SMALL) == 4
    assert snapshot.count(LogSize.MEDIUM) == 11
    assert snapshot.count(LogSize.LARGE) == 1
    assert snapshot.weighted_units == pytest.approx(14.0)
    assert snapshot.cords_burned == pytest.approx(14.0 / 400.0)
    assert snapshot.progress_fraction == pytest.approx((14.0 / 400.0) / 3.0)


def test_session_starting_exactly_at_season_start_is_included() -> None:
    fire = _fire(datetime(2026, 9, 1, tzinfo=TZ), (LogSize.SMALL, 1))
    snapshot = compute_snapshot([fire], SeasonConfig(), NOW)
    assert snapshot.season_fires == (fire,)


def test_active_session_is_reported() -> None:
    open_fire = _fire(NOW - timedelta(hours=1), (LogSize.LARGE, 2), ended=False)
    snapshot = compute_snapshot([*_sessions(), open_fire], SeasonConfig(), NOW)
    assert snapshot.active_session is open_fire


def test_more_than_one_open_session_is_surfaced() -> None:
    first = _fire(NOW - timedelta(hours=2), ended=False)
    second = _fire(NOW - timedelta(hours=1), ended=False)
    with pytest.raises(MultipleActiveSessionsError) as excinfo:
        compute_snapshot([first, second], SeasonConfig(), NOW)
    assert isinstance(excinfo.value, DataIntegrityError)
    assert [fire.session_id for fire in excinfo.value.sessions] == [first.session_id, second.session_id]


def test_open_session_from_previous_season_is_outside_window() -> None:
    stale = _fire(datetime(2025, 12, 1, tzinfo=TZ), ended=False)
    current = _fire(NOW - timedelta(hours=1), ended=False)
    snapshot = compute_snapshot([stale, current], SeasonConfig(), NOW)
    assert snapshot.active_session is current


def test_no_goal_means_no_progress() -> None:
    snapshot = compute_snapshot(_sessions(), SeasonConfig(season_goal=None), NOW)
    assert snapshot.progress_fraction is None
    assert not snapshot.has_goal


def test_progress_clamps_when_goal_exceeded() -> None:
    config = SeasonConfig(season_goal=0.01)
    snapshot = compute_snapshot(_sessions(), config, NOW)
    assert snapshot.progress_fraction == 1.0


def test_zero_units_per_cord_keeps_display_safe() -> None:
    snapshot = compute_snapshot(_sessions(), SeasonConfig(units_per_cord=0), NOW)
    assert snapshot.cords_burned == 0.0
    assert snapshot.progress_fraction == 0.0


def test_empty_record_set() -> None:
    snapshot = compute_snapshot([], SeasonConfig(), NOW)
    assert snapshot.season_fire_count == 0
    assert snapshot.total_logs == 0
    assert snapshot.cords_burned == 0.0


class TestSeasonStatisticsCache:
    def test_reuses_snapshot_while_inputs_unchanged(self) -> None:
        cache = SeasonStatisticsCache()
        sessions = _sessions()
        config = SeasonConfig()
        first = cache.snapshot(sessions, config, NOW, revision=1)
        second = cache.snapshot(sessions, config, NOW + timedelta(minutes=5), revision=1)
        assert second is first
        assert cache.refresh_count == 1

    def test_new_revision_recomputes(self) -> None:
        cache = SeasonStatisticsCache()
        sessions = _sessions()
        config = SeasonConfig()
        cache.snapshot(sessions, config, NOW, revision=1)
        sessions.append(_fire(NOW - timedelta(hours=4), (LogSize.LARGE, 200)))
        snapshot = cache.snapshot(sessions, config, NOW, revision=2)
        assert snapshot.total_logs == 216
        assert cache.refresh_count == 2

    def test_settings_edit_recomputes(self) -> None:
        cache = SeasonStatisticsCache()
        sessions = _sessions()
        config = SeasonConfig()
        before = cache.snapshot(sessions, config, NOW, revision=1)
        config.medium_ratio = 2.0
        after = cache.snapshot(sessions, config, NOW, revision=1)
        assert after.weighted_units == pytest.approx(before.weighted_units + 11.0)

        config.season_start_month = 3
        moved = cache.snapshot(sessions, config, NOW, revision=1)
        assert moved.season_fire_count == 3
        assert moved.season_start == datetime(2026, 3, 1, tzinfo=TZ)
        config.season_start_day = 5
        assert cache.snapshot(sessions, config, NOW, revision=1).season_fire_count == 2
        config.season_start_day = 1
        assert cache.snapshot(sessions, config, NOW, revision=1).season_fire_count == 3

    def test_season_rollover_recomputes(self) -> None:
        cache = SeasonStatisticsCache()
        sessions = _sessions()
        config = SeasonConfig()
        cache.snapshot(sessions, config, NOW, revision=1)
        next_season = datetime(2027, 9, 1, 0, 0, tzinfo=TZ)
        snapshot = cache.snapshot(sessions, config, next_season, revision=1)
        assert snapshot.season_fire_count == 0

    def test_invalidate_forces_refresh(self) -> None:
        cache = SeasonStatisticsCache()
        sessions = _sessions()
        config = SeasonConfig()
        cache.snapshot(sessions, config, NOW, revision=1)
        cache.invalidate("deleted", sessions[0])
        assert cache.current is None
        cache.snapshot(sessions, config, NOW, revision=1)
        assert cache.refresh_count == 2

    def test_reuses_snapshot_without_revision_until_records_change(self) -> None:
        cache = SeasonStatisticsCache()
        sessions = _sessions()
        config = SeasonConfig()
        first = cache.snapshot(sessions, config, NOW)
        assert cache.snapshot(sessions, config, NOW) is first

        sessions.append(_fire(NOW - timedelta(hours=4), (LogSize.SMALL, 2)))
        assert cache.snapshot(sessions, config, NOW).total_logs == 18
        assert cache.refresh_count == 2

    def test_in_place_session_edit_recomputes_under_same_revision(self) -> None:
        cache = SeasonStatisticsCache()
        burning = _fire(NOW - timedelta(hours=1), (LogSize.SMALL, 1), ended=False)
        config = SeasonConfig()
        assert cache.snapshot([burning], config, NOW, revision=7).total_logs == 1

        burning.add_logs(LogSize.LARGE, 3, timestamp=NOW)
        snapshot = cache.snapshot([burning], config, NOW, revision=7)
        assert snapshot.total_logs == 4
        assert snapshot.count(LogSize.LARGE) == 3

        burning.end(NOW)
        assert cache.snapshot([burning], config, NOW, revision=7).active_session is None
        assert cache.refresh_count == 3

    def test_integrity_violation_clears_cached_snapshot(self) -> None:
        cache = SeasonStatisticsCache()
        config = SeasonConfig()
        cache.snapshot(_sessions(), config, NOW, revision=1)
        broken = [_fire(NOW - timedelta(hours=2), ended=False), _fire(NOW - timedelta(hours=1), ended=False)]
        with pytest.raises(MultipleActiveSessionsError):
            cache.snapshot(broken, config, NOW, revision=2)
        assert cache.current is None
