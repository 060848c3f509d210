# src/safedate/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a local default.
- Optional config_local.py for safe machine-specific overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "SAFEDATE"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Switches ----
    console_enabled: bool
    notifications_enabled: bool

    # ---- Local data (ignored by git) ----
    data_dir: Path
    store_db_path: Path
    storage_key: str

    # ---- Notification channel ----
    channel_id: str
    channel_name: str
    channel_importance: int

    # ---- Delivery ----
    delivery_interval_seconds: float
    reject_past_triggers: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "safedate").strip() or "safedate"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        notifications_enabled = _env_bool(_k("NOTIFICATIONS_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/safedate"))
        store_db_path = _env_path(_k("STORE_DB_PATH"), data_dir / "store.sqlite3")
        storage_key = _env(_k("STORAGE_KEY"), "tasks").strip() or "tasks"

        channel_id = _env(_k("CHANNEL_ID"), "default").strip() or "default"
        channel_name = _env(_k("CHANNEL_NAME"), "Default Channel")
        # 4 is the HIGH importance level of the notification platform.
        channel_importance = max(0, min(4, _env_int(_k("CHANNEL_IMPORTANCE"), 4)))

        delivery_interval_seconds = _env_float(_k("DELIVERY_INTERVAL_SECONDS"), 1.0)
        reject_past_triggers = _env_bool(_k("REJECT_PAST_TRIGGERS"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            notifications_enabled=notifications_enabled,
            data_dir=data_dir,
            store_db_path=store_db_path,
            storage_key=storage_key,
            channel_id=channel_id,
            channel_name=channel_name,
            channel_importance=channel_importance,
            delivery_interval_seconds=delivery_interval_seconds,
            reject_past_triggers=reject_past_triggers,
        )


SETTINGS = Settings.from_env()

# ---- Optional local overrides (never committed) ----
# Prefer .env; use config_local.py only for safe overrides.
try:
    import config_local as _config_local  # type: ignore

    if hasattr(_config_local, "CONSOLE_ENABLED"):
        object.__setattr__(SETTINGS, "console_enabled", bool(_config_local.CONSOLE_ENABLED))  # type: ignore[misc]
    if hasattr(_config_local, "NOTIFICATIONS_ENABLED"):
        object.__setattr__(
            SETTINGS, "notifications_enabled", bool(_config_local.NOTIFICATIONS_ENABLED)
        )  # type: ignore[misc]
except Exception:
    pass


def get_settings() -> Settings:
    return SETTINGS
