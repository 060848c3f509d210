# src/safedate/notifications/models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum, StrEnum


class Importance(IntEnum):
    """Channel importance levels, ordered by severity."""

    NONE = 0
    MIN = 1
    LOW = 2
    DEFAULT = 3
    HIGH = 4


class AuthorizationStatus(IntEnum):
    NOT_DETERMINED = -1
    DENIED = 0
    AUTHORIZED = 1
    PROVISIONAL = 2


class EventType(StrEnum):
    DELIVERED = "delivered"
    PRESS = "press"
    DISMISSED = "dismissed"


class NotificationKind(StrEnum):
    DAILY = "daily"
    SAFE_DATE = "safe_date"
    DEADLINE = "deadline"


@dataclass(slots=True, frozen=True)
class NotificationChannel:
    id: str
    name: str
    importance: Importance = Importance.HIGH


@dataclass(slots=True, frozen=True)
class NotificationRequest:
    """
    One trigger notification derived from a task.

    timestamp_ms is the epoch-millisecond form of trigger_at; the platform
    only ever sees the former.
    """

    task_id: int
    kind: NotificationKind
    title: str
    body: str
    trigger_at: datetime
    timestamp_ms: int


@dataclass(slots=True, frozen=True)
class ScheduledNotification:
    """A trigger accepted by a platform, waiting for (or past) delivery."""

    id: str
    title: str
    body: str
    channel_id: str
    timestamp_ms: int


@dataclass(slots=True, frozen=True)
class NotificationEvent:
    type: EventType
    notification: ScheduledNotification


@dataclass(slots=True, frozen=True)
class ScheduleReport:
    """Outcome of handing one task's requests to the platform."""

    task_id: int
    requested: int
    scheduled: int
    failures: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures
