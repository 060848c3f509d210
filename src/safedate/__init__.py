"""safedate: tasks with safe dates, deadline reminders and completion stats."""

__version__ = "0.1.0"
