# src/safedate/core/datemath.py

"""
Date helpers shared by the notification scheduler and the stats engine.

All moments handled by the core are naive datetimes in local wall-clock time.
Aware values coming from storage are converted with to_local_naive().
"""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import datetime, timedelta

Clock = Callable[[], datetime]

_DAY = timedelta(days=1)


def difference_in_days(later: datetime, earlier: datetime) -> int:
    """
    Whole days between two moments, truncated toward zero.

    36 hours -> 1, 23 hours -> 0, -12 hours -> 0, -30 hours -> -1.
    """
    return int((later - earlier) / _DAY)


def remaining_days(deadline: datetime, now: datetime) -> int:
    """Ceiling of the whole-day difference between deadline and now."""
    return math.ceil(difference_in_days(deadline, now))


def is_after(a: datetime, b: datetime) -> bool:
    return a > b


def at_time_of_day(moment: datetime, hour: int, minute: int) -> datetime:
    """Same calendar date as `moment`, with the time set to hour:minute:00.000."""
    return moment.replace(hour=hour, minute=minute, second=0, microsecond=0)


def to_local_naive(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def to_epoch_ms(moment: datetime) -> int:
    # Naive values are interpreted as local time by datetime.timestamp().
    return int(round(moment.timestamp() * 1000))


def from_epoch_ms(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000)


def parse_iso(text: str) -> datetime:
    """Parse ISO-8601 text (offset or 'Z' allowed) into a local naive datetime."""
    if not isinstance(text, str) or not text.strip():
        raise ValueError(f"not an ISO-8601 date: {text!r}")
    return to_local_naive(datetime.fromisoformat(text.strip()))


def format_iso(moment: datetime) -> str:
    """ISO-8601 text with the local UTC offset, millisecond precision."""
    return moment.astimezone().isoformat(timespec="milliseconds")


def format_display(moment: datetime) -> str:
    """'Jan 5, 2025'"""
    return f"{moment:%b} {moment.day}, {moment:%Y}"
