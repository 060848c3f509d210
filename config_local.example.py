# config_local.example.py

"""
Example local overrides.

Usage:
  1) Copy this file to `config_local.py`
  2) Adjust values for your machine
  3) Never commit `config_local.py` (it is gitignored)

Prefer `.env`. This file should contain only safe overrides.
"""

# Example: run without the console (deliver reminders only)
# CONSOLE_ENABLED = False

# Example: keep tasks but never schedule reminders
# NOTIFICATIONS_ENABLED = False
