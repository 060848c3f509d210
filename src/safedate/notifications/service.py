# src/safedate/notifications/service.py

from __future__ import annotations

import logging
from datetime import datetime

from ..core.datemath import Clock
from ..core.ports import AlertSink, NotificationPlatform, Unsubscribe
from ..tasks.task_models import Task
from .models import (
    AuthorizationStatus,
    EventType,
    Importance,
    NotificationChannel,
    NotificationEvent,
    ScheduleReport,
)
from .scheduler import build_notifications

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL = NotificationChannel(id="default", name="Default Channel", importance=Importance.HIGH)


class NotificationService:
    """
    Bridge between the task store and a notification platform.

    - setup(): register the channel and ask for permission (once, at startup)
    - schedule_task(): submit a task's trigger notifications
    - install_event_logging(): log press/dismiss events

    Submission is best-effort: a rejected request is logged and counted in the
    ScheduleReport, never retried and never shown to the user.
    """

    def __init__(
            self,
            platform: NotificationPlatform,
            *,
            channel: NotificationChannel = DEFAULT_CHANNEL,
            alerts: AlertSink | None = None,
            clock: Clock = datetime.now,
    ) -> None:
        self._platform = platform
        self._channel = channel
        self._alerts = alerts
        self._clock = clock
        self._unsubscribers: list[Unsubscribe] = []

    @property
    def channel(self) -> NotificationChannel:
        return self._channel

    def setup(self) -> bool:
        """Returns True when the channel exists and permission was granted."""
        try:
            self._platform.create_channel(self._channel)
            logger.info("Notification channel created id=%s", self._channel.id)

            status = self._platform.request_permission()
        except Exception:
            logger.exception("Error setting up notifications")
            return False

        if status == AuthorizationStatus.AUTHORIZED:
            logger.info("Notification permission granted")
            return True

        logger.info("Notification permission not granted status=%s", status.name)
        if self._alerts is not None:
            try:
                self._alerts.alert("Notifications", "Notification permission not granted!")
            except Exception:
                logger.exception("Alert sink failed")
        return False

    def schedule_task(self, task: Task, now: datetime | None = None) -> ScheduleReport:
        requests = build_notifications(task, now if now is not None else self._clock())

        scheduled = 0
        failures: list[str] = []
        for req in requests:
            try:
                self._platform.create_trigger_notification(
                    title=req.title,
                    body=req.body,
                    channel_id=self._channel.id,
                    timestamp_ms=req.timestamp_ms,
                )
                scheduled += 1
            except Exception as e:
                logger.warning(
                    "Trigger notification rejected task_id=%s kind=%s at=%s: %s",
                    task.id,
                    req.kind.value,
                    req.trigger_at.isoformat(),
                    e,
                )
                failures.append(f"{req.kind.value}: {e}")

        logger.debug(
            "Scheduled notifications task_id=%s requested=%d scheduled=%d",
            task.id,
            len(requests),
            scheduled,
        )
        return ScheduleReport(
            task_id=task.id,
            requested=len(requests),
            scheduled=scheduled,
            failures=tuple(failures),
        )

    # ---- events ----

    def install_event_logging(self) -> None:
        if self._unsubscribers:
            return
        self._unsubscribers.append(self._platform.add_event_listener(_log_foreground_event))
        self._unsubscribers.append(
            self._platform.add_event_listener(_log_background_event, background=True)
        )

    def remove_event_logging(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()


def _log_foreground_event(event: NotificationEvent) -> None:
    if event.type == EventType.DISMISSED:
        logger.info("Notification dismissed: %s", event.notification.title)
    elif event.type == EventType.PRESS:
        logger.info("Notification pressed: %s", event.notification.title)


def _log_background_event(event: NotificationEvent) -> None:
    if event.type == EventType.PRESS:
        logger.info("Notification pressed in background: %s", event.notification.title)
