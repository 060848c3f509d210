# tests/fakes.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from safedate.core.ports import EventListener, NotificationSink, Unsubscribe
from safedate.notifications.models import AuthorizationStatus, NotificationChannel


class FixedClock:
    """Deterministic clock returning naive local datetimes."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class MemoryKeyValueStore:
    """
    In-memory KeyValueStore with failure switches.

    - fail_writes: set_item raises OSError
    - fail_reads: get_item raises OSError
    """

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})
        self.fail_writes = False
        self.fail_reads = False
        self.writes = 0

    def get_item(self, key: str) -> str | None:
        if self.fail_reads:
            raise OSError("disk unavailable")
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


@dataclass(slots=True)
class RecordingAlerts:
    alerts: list[tuple[str, str]] = field(default_factory=list)

    def alert(self, title: str, message: str) -> None:
        self.alerts.append((title, message))

    def messages(self) -> list[str]:
        return [m for _, m in self.alerts]


@dataclass(slots=True)
class Trigger:
    title: str
    body: str
    channel_id: str
    timestamp_ms: int


class RecordingPlatform:
    """
    NotificationPlatform that records every call.

    reject(timestamp_ms) -> True makes create_trigger_notification raise.
    """

    def __init__(
        self,
        *,
        permission: AuthorizationStatus = AuthorizationStatus.AUTHORIZED,
        reject: Callable[[int], bool] | None = None,
    ) -> None:
        self.permission = permission
        self.reject = reject
        self.channels: list[NotificationChannel] = []
        self.triggers: list[Trigger] = []
        self.listeners: list[tuple[EventListener, bool]] = []
        self.fail_setup = False

    def create_channel(self, channel: NotificationChannel) -> str:
        if self.fail_setup:
            raise RuntimeError("platform unavailable")
        self.channels.append(channel)
        return channel.id

    def request_permission(self) -> AuthorizationStatus:
        return self.permission

    def create_trigger_notification(
        self,
        *,
        title: str,
        body: str,
        channel_id: str,
        timestamp_ms: int,
    ) -> str:
        if self.reject is not None and self.reject(timestamp_ms):
            raise RuntimeError("trigger rejected")
        self.triggers.append(Trigger(title=title, body=body, channel_id=channel_id, timestamp_ms=timestamp_ms))
        return str(len(self.triggers))

    def add_event_listener(self, listener: EventListener, *, background: bool = False) -> Unsubscribe:
        entry = (listener, background)
        self.listeners.append(entry)
        return lambda: self.listeners.remove(entry)


@dataclass(slots=True)
class ShownNotification:
    title: str
    body: str
    channel_id: str


@dataclass(slots=True)
class FakeNotificationSink(NotificationSink):
    """
    Fake NotificationSink used by delivery tests.
    """

    shown: list[ShownNotification] = field(default_factory=list)
    fail: bool = False

    async def send_notification(self, *, title: str, body: str, channel_id: str) -> None:
        if self.fail:
            raise RuntimeError("screen off")
        self.shown.append(ShownNotification(title=title, body=body, channel_id=channel_id))
