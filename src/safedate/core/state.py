# src/safedate/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..notifications.platform import LocalNotificationPlatform
from ..notifications.service import NotificationService
from ..tasks.task_store import TaskStore
from .datemath import Clock


@dataclass
class AppState:
    # Settings (or a test stand-in) kept on the state for easy access in commands.
    settings: Any

    store: TaskStore
    notifications: NotificationService
    platform: LocalNotificationPlatform

    notifications_ready: bool = False
    clock: Clock = datetime.now

    # Serializes store access between the console and anything else touching it.
    lock: threading.Lock = field(default_factory=threading.Lock)
