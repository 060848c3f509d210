# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from safedate.cli.bootstrap import create_initial_state
from safedate.core.state import AppState
from safedate.notifications.platform import LocalNotificationPlatform
from safedate.tasks.task_models import Task

from .fakes import FixedClock, MemoryKeyValueStore, RecordingAlerts


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="safedate-test",
        data_dir=tmp_path,
        store_db_path=tmp_path / "store.sqlite3",
        storage_key="tasks",
        channel_id="default",
        channel_name="Default Channel",
        channel_importance=4,
        notifications_enabled=True,
        reject_past_triggers=False,
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 1, 1, 0, 0))


@pytest.fixture()
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def alerts() -> RecordingAlerts:
    return RecordingAlerts()


@pytest.fixture()
def platform(clock: FixedClock) -> LocalNotificationPlatform:
    return LocalNotificationPlatform(clock=lambda: clock().timestamp(), reject_past=False)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    kv: MemoryKeyValueStore,
    alerts: RecordingAlerts,
    platform: LocalNotificationPlatform,
    clock: FixedClock,
) -> AppState:
    """
    AppState wired with deterministic fakes.

    NOTE: the real TaskStore / NotificationService / LocalNotificationPlatform
    are used here; only storage, alerts and time are faked.
    """
    return create_initial_state(settings=settings, kv=kv, alerts=alerts, platform=platform, clock=clock)


@pytest.fixture()
def make_task():
    def _make(
        task_id: int = 1,
        *,
        name: str = "Write report",
        description: str = "Quarterly numbers",
        deadline: datetime = datetime(2025, 1, 10),
        safe: datetime = datetime(2025, 1, 5),
        completed: bool = False,
        completion_date: datetime | None = None,
    ) -> Task:
        return Task(
            id=task_id,
            name=name,
            description=description,
            deadline_date=deadline,
            safe_date=safe,
            completed=completed,
            completion_date=completion_date,
        )

    return _make
