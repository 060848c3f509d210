# src/safedate/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (key-value store, task store,
  notification platform and service, console alerts).
"""

from __future__ import annotations

import logging
from datetime import datetime

from ..config import get_settings
from ..connectors.console_connector import ConsoleAlertSink
from ..core.datemath import Clock
from ..core.ports import AlertSink, KeyValueStore
from ..core.state import AppState
from ..notifications.models import Importance, NotificationChannel
from ..notifications.platform import LocalNotificationPlatform
from ..notifications.service import NotificationService
from ..storage.kv_store import SqliteKeyValueStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
        *,
        settings=None,
        kv: KeyValueStore | None = None,
        alerts: AlertSink | None = None,
        platform: LocalNotificationPlatform | None = None,
        clock: Clock = datetime.now,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and collaborators injectable makes the app easier to test
    and avoids hidden global config reads. If settings is None, falls back to
    get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if kv is None:
        kv = SqliteKeyValueStore(settings.store_db_path)
    if alerts is None:
        alerts = ConsoleAlertSink()
    if platform is None:
        platform = LocalNotificationPlatform(reject_past=settings.reject_past_triggers)

    channel = NotificationChannel(
        id=settings.channel_id,
        name=settings.channel_name,
        importance=Importance(settings.channel_importance),
    )
    notifications = NotificationService(platform, channel=channel, alerts=alerts, clock=clock)

    store = TaskStore(
        kv,
        notifier=notifications if settings.notifications_enabled else None,
        alerts=alerts,
        storage_key=settings.storage_key,
        clock=clock,
    )

    return AppState(
        settings=settings,
        store=store,
        notifications=notifications,
        platform=platform,
        clock=clock,
    )


def start_app(state: AppState) -> None:
    """Register the notification channel, then load the persisted tasks."""
    if state.settings.notifications_enabled:
        state.notifications_ready = state.notifications.setup()
        state.notifications.install_event_logging()
    else:
        logger.info("Notifications disabled, skipping channel setup.")

    change = state.store.load()
    if not change.ok:
        logger.warning("Starting with an empty task list: %s", change.error)
