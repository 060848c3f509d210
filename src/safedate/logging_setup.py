# src/safedate/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Loggers that fire on every delivery tick or trigger; console shows WARNING+ only.
_BACKGROUND_LOGGERS = (
    "safedate.notifications.delivery",
    "safedate.notifications.platform",
)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keeps the REPL readable while reminders are delivered in the background.

    safedate records pass, except the background loggers below WARNING.
    Everything else (third-party, captured py.warnings) needs ERROR.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if not name.startswith("safedate."):
            return record.levelno >= logging.ERROR
        if name.startswith(_BACKGROUND_LOGGERS):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/safedate",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route all logging to stderr (filtered) and to <log_dir>/safedate.log (unfiltered).

    Replaces any handlers already on the root logger, so calling it again
    does not duplicate output. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "safedate.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    # warnings.warn(...) arrives as 'py.warnings'
    logging.captureWarnings(True)
    return log_file
