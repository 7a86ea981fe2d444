from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from cordkeeper.errors import SessionStateError
from cordkeeper.fires.models import FireSession, LogRecord, LogSize
from cordkeeper.season.ratios import SizeRatioTable

START = datetime(2026, 10, 3, 17, 0, tzinfo=timezone.utc)


def test_new_session_is_active_and_in_progress() -> None:
    fire = FireSession(start_time=START)
    assert fire.is_active
    assert fire.duration is None
    assert fire.formatted_duration == "In progress"
    assert fire.log_summary == "No logs"


def test_per_size_totals_units_and_cord_equivalent() -> None:
    fire = FireSession(start_time=START)
    fire.add_logs(LogSize.SMALL, 4, timestamp=START)
    fire.add_logs("Medium", timestamp=START)
    fire.add_logs(LogSize.LARGE, 1, timestamp=START)
    fire.add_logs(LogSize.SMALL, 2, timestamp=START)

    assert (fire.total_small, fire.total_medium, fire.total_large) == (6, 1, 1)
    assert fire.total_logs == 8
    assert fire.total_units(SizeRatioTable()) == pytest.approx(4.5)
    assert fire.cord_equivalent(SizeRatioTable(), 0) == 0.0
    assert fire.log_summary == "6S • 1M • 1L"


@pytest.mark.parametrize(
    "elapsed, expected",
    [
        (timedelta(minutes=45), "45m"),
        (timedelta(hours=2, minutes=5), "2h 5m"),
        (timedelta(seconds=30), "0m"),
    ],
)
def test_formatted_duration(elapsed: timedelta, expected: str) -> None:
    fire = FireSession(start_time=START)
    fire.end(START + elapsed)
    assert fire.formatted_duration == expected


def test_end_time_is_set_once() -> None:
    fire = FireSession(start_time=START)
    fire.end(START + timedelta(hours=1))
    with pytest.raises(SessionStateError):
        fire.end(START + timedelta(hours=2))


def test_end_before_start_is_rejected() -> None:
    fire = FireSession(start_time=START)
    with pytest.raises(ValueError, match="earlier"):
        fire.end(START - timedelta(minutes=1))
    assert fire.is_active


def test_stored_negative_duration_is_clamped_to_zero() -> None:
    fire = FireSession(start_time=START, end_time=START - timedelta(hours=1))
    assert fire.duration == timedelta(0)
    assert fire.formatted_duration == "0m"


def test_cannot_log_on_ended_fire() -> None:
    fire = FireSession(start_time=START)
    fire.end(START)
    with pytest.raises(SessionStateError):
        fire.add_logs(LogSize.SMALL)


@pytest.mark.parametrize("quantity", [0, -3, 1.5])
def test_quantity_must_be_positive_whole_number(quantity: float) -> None:
    with pytest.raises(ValueError):
        LogRecord(LogSize.SMALL, quantity)  # type: ignore[arg-type]


def test_corrupt_size_on_load_falls_back_to_medium() -> None:
    record = LogRecord("Enormous", 2)  # type: ignore[arg-type]
    assert record.size is LogSize.MEDIUM
