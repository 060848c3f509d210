# src/safedate/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage / notification platforms / user-facing surfaces swappable
and makes testing easier.
"""

from collections.abc import Callable
from typing import Any, Awaitable, Protocol

from ..notifications.models import (
    AuthorizationStatus,
    NotificationChannel,
    NotificationEvent,
    ScheduleReport,
)

EventListener = Callable[[NotificationEvent], None]
Unsubscribe = Callable[[], None]


class KeyValueStore(Protocol):
    """Persisted string store. Missing keys read as None."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class NotificationPlatform(Protocol):
    """
    Platform that delivers trigger notifications.

    The core relies only on "fires at or after timestamp_ms"; channel
    registration and permission are one-time setup calls.
    """

    def create_channel(self, channel: NotificationChannel) -> str: ...
    def request_permission(self) -> AuthorizationStatus: ...

    def create_trigger_notification(
            self,
            *,
            title: str,
            body: str,
            channel_id: str,
            timestamp_ms: int,
    ) -> str: ...

    def add_event_listener(self, listener: EventListener, *, background: bool = False) -> Unsubscribe: ...


class NotificationSink(Protocol):
    """
    Presentation-side port: how a delivered notification reaches the user.

    The console prints it; another surface may render it differently.
    """

    def send_notification(self, *, title: str, body: str, channel_id: str) -> Awaitable[None]: ...


class AlertSink(Protocol):
    """User-visible alerts (load/save failures, missing permission)."""

    def alert(self, title: str, message: str) -> None: ...


class TaskNotifier(Protocol):
    # Task is kept as Any to avoid import coupling with the tasks package.
    def schedule_task(self, task: Any) -> ScheduleReport: ...
