# tests/test_stats.py

from __future__ import annotations

from datetime import datetime

import pytest

from safedate.stats.engine import CompletionBucket, classify_completion, compute_stats, format_stats

NOW = datetime(2025, 1, 1)


def test_no_tasks_gives_zero_rate() -> None:
    stats = compute_stats([], NOW)
    assert stats.total_tasks == 0
    assert stats.completed_count == 0
    assert stats.completion_rate == 0.0
    assert all(stats.bucket_count(b) == 0 for b in CompletionBucket)


@pytest.mark.parametrize(
    ("done_at", "expected"),
    [
        (datetime(2025, 1, 4, 23, 59), CompletionBucket.BEFORE_SAFE_DATE),
        (datetime(2025, 1, 5, 0, 0), CompletionBucket.ON_SAFE_DATE),
        (datetime(2025, 1, 5, 18, 0), CompletionBucket.ON_SAFE_DATE),
        (datetime(2025, 1, 7, 12, 0), None),
        (datetime(2025, 1, 9, 12, 0), CompletionBucket.ON_DEADLINE),
        (datetime(2025, 1, 10, 12, 0), CompletionBucket.ON_DEADLINE),
        (datetime(2025, 1, 11, 0, 0), CompletionBucket.AFTER_DEADLINE),
    ],
)
def test_classify_completion(make_task, done_at, expected) -> None:
    task = make_task(1, completed=True, completion_date=done_at)
    assert classify_completion(task) == expected


def test_safe_date_equal_to_deadline_counts_as_on_safe_date(make_task) -> None:
    day = datetime(2025, 1, 10)
    task = make_task(1, deadline=day, safe=day, completed=True, completion_date=datetime(2025, 1, 10, 6, 0))
    assert classify_completion(task) == CompletionBucket.ON_SAFE_DATE


def test_active_or_undated_tasks_are_not_classified(make_task) -> None:
    assert classify_completion(make_task(1)) is None
    assert classify_completion(make_task(2, completed=True)) is None


def test_compute_stats_counts(make_task) -> None:
    tasks = [
        make_task(1, completed=True, completion_date=datetime(2025, 1, 3)),
        make_task(2, completed=True, completion_date=datetime(2025, 1, 7, 12, 0)),
        make_task(3, completed=True),
        make_task(4),
        make_task(5, deadline=datetime(2024, 12, 31), safe=datetime(2024, 12, 30)),
        make_task(6, deadline=NOW, safe=datetime(2024, 12, 30)),
    ]

    stats = compute_stats(tasks, NOW)

    assert stats.total_tasks == 6
    assert stats.completed_count == 3
    assert stats.completion_rate == pytest.approx(50.0)
    assert stats.before_safe_date == 1
    assert stats.on_safe_date == 0
    assert stats.on_deadline == 0
    assert stats.after_deadline == 0
    # deadline exactly now is not yet overdue
    assert stats.still_incomplete_after_deadline == 1


def test_completed_late_task_is_not_overdue(make_task) -> None:
    late = make_task(
        1,
        deadline=datetime(2024, 12, 20),
        safe=datetime(2024, 12, 15),
        completed=True,
        completion_date=datetime(2024, 12, 25),
    )
    stats = compute_stats([late], NOW)
    assert stats.after_deadline == 1
    assert stats.still_incomplete_after_deadline == 0
    assert stats.completion_rate == 100.0


def test_format_stats(make_task) -> None:
    tasks = [make_task(1, completed=True, completion_date=datetime(2025, 1, 2)), make_task(2), make_task(3)]
    lines = format_stats(compute_stats(tasks, NOW))
    assert lines[0] == "Total Tasks: 3"
    assert lines[1] == "Completed Tasks: 1"
    assert lines[2] == "Completion Rate: 33.33%"
    assert lines[3] == "Completed Before Safe Date: 1"
    assert lines[-1] == "Still Incomplete After Deadline: 0"
