# src/safedate/notifications/scheduler.py

from __future__ import annotations

"""
Notification scheduling rules.

build_notifications() is a pure function of (task, now). It decides which
trigger notifications a task gets and what they say; handing them to a
platform belongs to NotificationService.

Rules:
- while the deadline is at least one whole day away: three reminders at
  08:00, 12:00 and 18:00 of *now's* date (today only, not every day),
- always: one reminder at the safe date,
- always: one reminder at the deadline.
"""

from datetime import datetime
from typing import Final

from ..core.datemath import at_time_of_day, remaining_days, to_epoch_ms
from ..tasks.task_models import Task
from .models import NotificationKind, NotificationRequest

DAILY_REMINDER_TIMES: Final[tuple[tuple[int, int], ...]] = ((8, 0), (12, 0), (18, 0))

REMINDER_TITLE: Final = "Task Reminder"
DEADLINE_TITLE: Final = "Task Deadline Reminder"


def _request(task: Task, kind: NotificationKind, title: str, body: str, at: datetime) -> NotificationRequest:
    return NotificationRequest(
        task_id=task.id,
        kind=kind,
        title=title,
        body=body,
        trigger_at=at,
        timestamp_ms=to_epoch_ms(at),
    )


def build_notifications(task: Task, now: datetime) -> list[NotificationRequest]:
    days_left = remaining_days(task.deadline_date, now)
    out: list[NotificationRequest] = []

    if days_left > 0:
        body = (
            f'Task "{task.name}" is due in {days_left} day(s). '
            "Keep working toward the deadline!"
        )
        for hour, minute in DAILY_REMINDER_TIMES:
            out.append(
                _request(task, NotificationKind.DAILY, REMINDER_TITLE, body, at_time_of_day(now, hour, minute))
            )

    out.append(
        _request(
            task,
            NotificationKind.SAFE_DATE,
            REMINDER_TITLE,
            f'Task "{task.name}" is due today. Please complete it!',
            task.safe_date,
        )
    )
    out.append(
        _request(
            task,
            NotificationKind.DEADLINE,
            DEADLINE_TITLE,
            f'Task "{task.name}" is due soon. {days_left} days left until the deadline.',
            task.deadline_date,
        )
    )
    return out
