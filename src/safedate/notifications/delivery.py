# src/safedate/notifications/delivery.py

from __future__ import annotations

"""
Notification delivery loop.

A small polling loop that:
- pops due triggers from the LocalNotificationPlatform,
- presents them via an injected NotificationSink,
- emits DELIVERED events.

Presentation (formatting, where text is printed) belongs to the sink.
"""

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass

from ..core.ports import NotificationSink
from .platform import LocalNotificationPlatform

logger = logging.getLogger(__name__)


async def deliver_due(platform: LocalNotificationPlatform, sink: NotificationSink) -> int:
    """Deliver everything currently due. Returns the number presented."""
    delivered = 0
    for note in platform.pop_due():
        try:
            await sink.send_notification(
                title=note.title,
                body=note.body,
                channel_id=note.channel_id,
            )
        except Exception:
            # No retry: a missed notification is simply absent.
            logger.exception("Notification delivery failed id=%s", note.id)
            continue

        platform.mark_delivered(note)
        delivered += 1
        logger.info("Notification delivered id=%s title=%s", note.id, note.title)
    return delivered


async def run_delivery_loop(
        platform: LocalNotificationPlatform,
        sink: NotificationSink,
        *,
        interval_seconds: float = 1.0,
        stop_event: asyncio.Event | None = None,
) -> None:
    """
    Poll every interval_seconds until stop_event is set.

    Without a stop_event, cancel the coroutine/task to stop it.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while stop_event is None or not stop_event.is_set():
        try:
            await deliver_due(platform, sink)
        except Exception:
            logger.exception("deliver_due failed")

        if stop_event is None:
            await asyncio.sleep(sleep_s)
            continue

        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stop_event.wait(), timeout=sleep_s)


@dataclass
class DeliveryBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal delivery stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_delivery_in_background(
        platform: LocalNotificationPlatform,
        sink: NotificationSink,
        *,
        interval_seconds: float = 1.0,
) -> DeliveryBackgroundRunner | None:
    """
    Start the delivery loop in a background thread with its own event loop.

    The console REPL blocks on input(), so delivery cannot share its thread.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(
                run_delivery_loop(platform, sink, interval_seconds=interval_seconds, stop_event=stop_event)
            )
        finally:
            with contextlib.suppress(Exception):
                loop.stop()
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="safedate-delivery", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Delivery thread did not initialize properly.")
        return None

    logger.info("Notification delivery thread started.")
    return DeliveryBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
