# src/safedate/notifications/platform.py

from __future__ import annotations

import bisect
import contextlib
import logging
import threading
import time
import uuid
from collections import deque
from collections.abc import Callable

from ..core.ports import EventListener, Unsubscribe
from ..errors import SchedulingFailure
from .models import (
    AuthorizationStatus,
    EventType,
    NotificationChannel,
    NotificationEvent,
    ScheduledNotification,
)

logger = logging.getLogger(__name__)


class LocalNotificationPlatform:
    """
    In-process notification platform.

    Keeps accepted triggers in a time-ordered queue; the delivery loop
    (notifications/delivery.py) pops due ones and presents them.

    Thread-safety:
    - the queue and listener lists are guarded by one lock, because the
      delivery loop runs in a background thread
    - listeners are called outside the lock
    """

    def __init__(
            self,
            *,
            clock: Callable[[], float] = time.time,
            reject_past: bool = True,
            authorization: AuthorizationStatus = AuthorizationStatus.AUTHORIZED,
            keep_delivered: int = 100,
    ) -> None:
        self._clock = clock
        self._reject_past = reject_past
        self._authorization = authorization
        self._lock = threading.Lock()
        self._channels: dict[str, NotificationChannel] = {}
        self._pending: list[tuple[int, int, ScheduledNotification]] = []
        self._seq = 0
        # Only the most recent deliveries stay pressable.
        self._delivered: deque[ScheduledNotification] = deque(maxlen=max(1, keep_delivered))
        self._fg_listeners: list[EventListener] = []
        self._bg_listeners: list[EventListener] = []
        self.foreground = True

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    # ---- setup ----

    def create_channel(self, channel: NotificationChannel) -> str:
        with self._lock:
            self._channels[channel.id] = channel
        logger.debug("Channel registered id=%s importance=%s", channel.id, channel.importance.name)
        return channel.id

    def request_permission(self) -> AuthorizationStatus:
        return self._authorization

    # ---- triggers ----

    def create_trigger_notification(
            self,
            *,
            title: str,
            body: str,
            channel_id: str,
            timestamp_ms: int,
    ) -> str:
        if self._authorization not in (AuthorizationStatus.AUTHORIZED, AuthorizationStatus.PROVISIONAL):
            raise SchedulingFailure("notification permission not granted")

        now_ms = self._now_ms()
        if self._reject_past and int(timestamp_ms) <= now_ms:
            raise SchedulingFailure(f"timestamp must be in the future (got {timestamp_ms}, now {now_ms})")

        with self._lock:
            if channel_id not in self._channels:
                raise SchedulingFailure(f"unknown channel: {channel_id}")

            note = ScheduledNotification(
                id=uuid.uuid4().hex[:12],
                title=title,
                body=body,
                channel_id=channel_id,
                timestamp_ms=int(timestamp_ms),
            )
            self._seq += 1
            bisect.insort(self._pending, (note.timestamp_ms, self._seq, note))

        logger.debug("Trigger accepted id=%s at_ms=%s", note.id, note.timestamp_ms)
        return note.id

    def pending(self) -> list[ScheduledNotification]:
        with self._lock:
            return [n for _, _, n in self._pending]

    def delivered(self) -> list[ScheduledNotification]:
        with self._lock:
            return list(self._delivered)

    def pop_due(self, now_ms: int | None = None) -> list[ScheduledNotification]:
        """Remove and return every pending trigger whose time has come."""
        limit = self._now_ms() if now_ms is None else int(now_ms)
        with self._lock:
            cut = bisect.bisect_right(self._pending, (limit, float("inf")))
            due = [n for _, _, n in self._pending[:cut]]
            del self._pending[:cut]
        return due

    def mark_delivered(self, note: ScheduledNotification) -> None:
        with self._lock:
            self._delivered.append(note)
        self.dispatch_event(NotificationEvent(type=EventType.DELIVERED, notification=note))

    # ---- events ----

    def add_event_listener(self, listener: EventListener, *, background: bool = False) -> Unsubscribe:
        with self._lock:
            (self._bg_listeners if background else self._fg_listeners).append(listener)

        def unsubscribe() -> None:
            with self._lock, contextlib.suppress(ValueError):
                (self._bg_listeners if background else self._fg_listeners).remove(listener)

        return unsubscribe

    def dispatch_event(self, event: NotificationEvent) -> None:
        with self._lock:
            listeners = list(self._fg_listeners if self.foreground else self._bg_listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Notification event listener failed type=%s", event.type.value)

    def press(self, notification_id: str) -> bool:
        return self._user_action(notification_id, EventType.PRESS)

    def dismiss(self, notification_id: str) -> bool:
        return self._user_action(notification_id, EventType.DISMISSED)

    def _user_action(self, notification_id: str, event_type: EventType) -> bool:
        with self._lock:
            note = next((n for n in self._delivered if n.id == notification_id), None)
        if note is None:
            return False
        self.dispatch_event(NotificationEvent(type=event_type, notification=note))
        return True
