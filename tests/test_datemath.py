# tests/test_datemath.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from safedate.core.datemath import (
    at_time_of_day,
    difference_in_days,
    format_display,
    format_iso,
    from_epoch_ms,
    parse_iso,
    remaining_days,
    to_epoch_ms,
)

BASE = datetime(2025, 1, 1, 0, 0)


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(days=9), 9),
        (timedelta(hours=36), 1),
        (timedelta(hours=23, minutes=59), 0),
        (timedelta(hours=-12), 0),
        (timedelta(hours=-30), -1),
    ],
)
def test_difference_in_days_truncates_toward_zero(delta: timedelta, expected: int) -> None:
    assert difference_in_days(BASE + delta, BASE) == expected


def test_remaining_days_for_report_scenario() -> None:
    assert remaining_days(datetime(2025, 1, 10), datetime(2025, 1, 1)) == 9
    assert remaining_days(datetime(2024, 12, 30), datetime(2025, 1, 1)) == -2


def test_at_time_of_day_keeps_date_and_clears_seconds() -> None:
    moment = datetime(2025, 1, 1, 15, 42, 13, 500)
    assert at_time_of_day(moment, 8, 0) == datetime(2025, 1, 1, 8, 0)


def test_iso_text_round_trips_as_local_time() -> None:
    moment = datetime(2025, 1, 5, 9, 30)
    assert parse_iso(format_iso(moment)) == moment


def test_parse_iso_accepts_utc_suffix() -> None:
    parsed = parse_iso("2025-01-05T00:00:00.000Z")
    expected = datetime(2025, 1, 5, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parsed == expected
    assert parsed.tzinfo is None


@pytest.mark.parametrize("bad", ["", "   ", "not a date", "2025-13-45"])
def test_parse_iso_rejects_garbage(bad: str) -> None:
    with pytest.raises(ValueError):
        parse_iso(bad)


def test_epoch_ms_matches_local_timestamp() -> None:
    moment = datetime(2025, 1, 1, 8, 0)
    ms = to_epoch_ms(moment)
    assert ms == int(moment.timestamp() * 1000)
    assert from_epoch_ms(ms) == moment


def test_format_display() -> None:
    assert format_display(datetime(2025, 1, 5)) == "Jan 5, 2025"
