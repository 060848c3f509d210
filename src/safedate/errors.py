# src/safedate/errors.py

"""Error types shared across the task, storage and notification layers."""

from __future__ import annotations


class SafedateError(Exception):
    """Base class for all safedate errors."""


class TaskValidationError(SafedateError, ValueError):
    """A task draft is missing required fields."""


class LoadFailure(SafedateError):
    """Persisted task data could not be read or parsed."""


class SaveFailure(SafedateError):
    """The task collection could not be written to the persisted store."""


class SchedulingFailure(SafedateError):
    """The notification platform refused or failed a trigger request."""
