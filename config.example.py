# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use:
- .env (local, gitignored)
- config_local.py (local safe overrides, gitignored)

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "SAFEDATE_APP_NAME": "App display name (default: safedate).",
    "SAFEDATE_LOG_LEVEL": "Console logging level (default: INFO).",
    # Switches
    "SAFEDATE_CONSOLE_ENABLED": "Enable the console REPL (true/false, default: true).",
    "SAFEDATE_NOTIFICATIONS_ENABLED": "Schedule and deliver reminders (true/false, default: true).",
    # Paths (gitignored)
    "SAFEDATE_DATA_DIR": "Local data directory, also holds safedate.log (default: .local/safedate).",
    "SAFEDATE_STORE_DB_PATH": "Key-value SQLite path (default: <data_dir>/store.sqlite3).",
    "SAFEDATE_STORAGE_KEY": "Key the task list is stored under (default: tasks).",
    # Notification channel
    "SAFEDATE_CHANNEL_ID": "Channel id for every reminder (default: default).",
    "SAFEDATE_CHANNEL_NAME": "Channel display name (default: Default Channel).",
    "SAFEDATE_CHANNEL_IMPORTANCE": "0 (none) .. 4 (high), clamped (default: 4).",
    # Delivery
    "SAFEDATE_DELIVERY_INTERVAL_SECONDS": "How often due reminders are checked (default: 1.0).",
    "SAFEDATE_REJECT_PAST_TRIGGERS": "Refuse reminders whose time already passed (default: true).",
}
