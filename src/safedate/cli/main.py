# src/safedate/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads tasks, then starts:
- notification delivery in a background thread (optional),
- console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state, start_app
from ..config import get_settings
from ..connectors.console_connector import ConsoleNotificationSink, run_console_loop
from ..logging_setup import setup_logging
from ..notifications.delivery import DeliveryBackgroundRunner, start_delivery_in_background

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)
    start_app(state)

    delivery: DeliveryBackgroundRunner | None = None
    if settings.notifications_enabled:
        delivery = start_delivery_in_background(
            state.platform,
            ConsoleNotificationSink(),
            interval_seconds=settings.delivery_interval_seconds,
        )

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        signal.signal(signal.SIGINT, _handle_signal)
        signal.signal(signal.SIGTERM, _handle_signal)
    except Exception:
        # Some platforms may not support SIGTERM, etc.
        pass

    try:
        if settings.console_enabled:
            run_console_loop(state)
            stop_main.set()
        else:
            logger.info("Console disabled. Delivering notifications only. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        if delivery is not None:
            delivery.stop()
            delivery.join(timeout=10.0)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
