# tests/test_scenarios.py

from __future__ import annotations

from datetime import datetime

from safedate.cli.bootstrap import create_initial_state, start_app
from safedate.core.datemath import to_epoch_ms
from safedate.notifications.models import NotificationKind
from safedate.notifications.scheduler import build_notifications
from safedate.stats.engine import compute_stats
from safedate.tasks.task_models import TaskDraft

from .fakes import FixedClock, RecordingAlerts


def _write_report() -> TaskDraft:
    return TaskDraft(
        name="Write report",
        description="Quarterly numbers",
        deadline_date=datetime(2025, 1, 10),
        safe_date=datetime(2025, 1, 5),
    )


def test_write_report_lifecycle(state, clock, alerts) -> None:
    start_app(state)

    change = state.store.create(_write_report())
    task = change.task
    assert change.ok
    assert change.notifications.requested == 5
    assert change.notifications.scheduled == 5

    kinds = [r.kind for r in build_notifications(task, clock())]
    assert kinds.count(NotificationKind.DAILY) == 3

    stats = compute_stats(state.store.tasks, clock())
    assert (stats.total_tasks, stats.completed_count, stats.completion_rate) == (1, 0, 0.0)

    clock.now = datetime(2025, 1, 4)
    state.store.complete(task.id)
    stats = compute_stats(state.store.tasks, clock())
    assert stats.completed_count == 1
    assert stats.completion_rate == 100.0
    assert stats.before_safe_date == 1
    assert stats.on_safe_date == stats.on_deadline == stats.after_deadline == 0
    assert stats.still_incomplete_after_deadline == 0
    assert alerts.alerts == []


def test_tasks_survive_restart(settings, tmp_path) -> None:
    clock = FixedClock(datetime(2025, 1, 1))
    first = create_initial_state(settings=settings, alerts=RecordingAlerts(), clock=clock)
    start_app(first)
    task = first.store.create(_write_report()).task
    clock.advance(days=3)
    first.store.complete(task.id)

    second = create_initial_state(settings=settings, alerts=RecordingAlerts(), clock=clock)
    start_app(second)

    (loaded,) = second.store.tasks
    assert loaded.id == to_epoch_ms(datetime(2025, 1, 1))
    assert loaded.completed is True
    assert loaded.completion_date == datetime(2025, 1, 4)
    assert loaded.deadline_date == datetime(2025, 1, 10)
    assert (tmp_path / "store.sqlite3").exists()


def test_corrupted_storage_starts_empty_with_alert(state, kv, alerts) -> None:
    kv.data["tasks"] = "{not json"
    start_app(state)

    assert state.store.tasks == ()
    assert alerts.messages() == ["Failed to load tasks"]


def test_failed_save_keeps_change_in_memory(state, kv, alerts) -> None:
    start_app(state)
    kv.fail_writes = True

    change = state.store.create(_write_report())

    assert not change.ok
    assert state.store.tasks == (change.task,)
    assert "tasks" not in kv.data
    assert alerts.messages() == ["Failed to save tasks"]
    # scheduling still happens after a failed save
    assert change.notifications.scheduled == 5


def test_notifications_disabled_schedules_nothing(settings, kv, alerts, platform, clock) -> None:
    settings.notifications_enabled = False
    state = create_initial_state(settings=settings, kv=kv, alerts=alerts, platform=platform, clock=clock)
    start_app(state)

    change = state.store.create(_write_report())

    assert change.ok
    assert change.notifications is None
    assert platform.pending() == []
    assert state.notifications_ready is False
