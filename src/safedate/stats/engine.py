# src/safedate/stats/engine.py

from __future__ import annotations

"""
Completion statistics.

compute_stats() is a pure function of (tasks, now). Completed tasks are put
in at most one bucket, first match wins:

1. before_safe_date  completion < safe date (exact moment)
2. on_safe_date      less than one whole day from the safe date
3. on_deadline       less than one whole day from the deadline
4. after_deadline    completion > deadline

A task finished between the safe date and the deadline, more than a day away
from both, lands in no bucket and is only counted as completed.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from ..core.datemath import difference_in_days, is_after
from ..tasks.task_models import Task


class CompletionBucket(StrEnum):
    BEFORE_SAFE_DATE = "before_safe_date"
    ON_SAFE_DATE = "on_safe_date"
    ON_DEADLINE = "on_deadline"
    AFTER_DEADLINE = "after_deadline"


@dataclass(slots=True, frozen=True)
class TaskStats:
    total_tasks: int
    completed_count: int
    completion_rate: float
    before_safe_date: int
    on_safe_date: int
    on_deadline: int
    after_deadline: int
    still_incomplete_after_deadline: int

    def bucket_count(self, bucket: CompletionBucket) -> int:
        return int(getattr(self, bucket.value))


def classify_completion(task: Task) -> CompletionBucket | None:
    done_at = task.completion_date
    if not task.completed or done_at is None:
        return None

    if done_at < task.safe_date:
        return CompletionBucket.BEFORE_SAFE_DATE
    if difference_in_days(done_at, task.safe_date) == 0:
        return CompletionBucket.ON_SAFE_DATE
    if difference_in_days(done_at, task.deadline_date) == 0:
        return CompletionBucket.ON_DEADLINE
    if is_after(done_at, task.deadline_date):
        return CompletionBucket.AFTER_DEADLINE
    return None


def compute_stats(tasks: Iterable[Task], now: datetime) -> TaskStats:
    items = list(tasks)
    total = len(items)
    completed = [t for t in items if t.completed]
    rate = (len(completed) / total) * 100 if total else 0.0

    counts = {b: 0 for b in CompletionBucket}
    for task in completed:
        bucket = classify_completion(task)
        if bucket is not None:
            counts[bucket] += 1

    overdue = sum(1 for t in items if not t.completed and is_after(now, t.deadline_date))

    return TaskStats(
        total_tasks=total,
        completed_count=len(completed),
        completion_rate=rate,
        before_safe_date=counts[CompletionBucket.BEFORE_SAFE_DATE],
        on_safe_date=counts[CompletionBucket.ON_SAFE_DATE],
        on_deadline=counts[CompletionBucket.ON_DEADLINE],
        after_deadline=counts[CompletionBucket.AFTER_DEADLINE],
        still_incomplete_after_deadline=overdue,
    )


def format_stats(stats: TaskStats) -> list[str]:
    return [
        f"Total Tasks: {stats.total_tasks}",
        f"Completed Tasks: {stats.completed_count}",
        f"Completion Rate: {stats.completion_rate:.2f}%",
        f"Completed Before Safe Date: {stats.before_safe_date}",
        f"Completed On Safe Date: {stats.on_safe_date}",
        f"Completed On Deadline: {stats.on_deadline}",
        f"Completed After Deadline: {stats.after_deadline}",
        f"Still Incomplete After Deadline: {stats.still_incomplete_after_deadline}",
    ]
