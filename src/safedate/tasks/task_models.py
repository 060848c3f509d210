# src/safedate/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum

from ..errors import TaskValidationError


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Derived from Task.completed; it is never stored on its own.
    """

    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(slots=True, frozen=True)
class TaskDraft:
    """User input for a new or edited task, before an id is attached."""

    name: str
    description: str
    deadline_date: datetime
    safe_date: datetime

    def validate(self) -> TaskDraft:
        if not (self.name or "").strip() or not (self.description or "").strip():
            raise TaskValidationError("All fields are required!")
        return self

    def to_task(self, task_id: int) -> Task:
        self.validate()
        return Task(
            id=int(task_id),
            name=self.name.strip(),
            description=self.description.strip(),
            deadline_date=self.deadline_date,
            safe_date=self.safe_date,
        )


@dataclass(slots=True, frozen=True)
class Task:
    id: int
    name: str
    description: str
    deadline_date: datetime
    safe_date: datetime

    completed: bool = False
    completion_date: datetime | None = None

    @property
    def status(self) -> TaskStatus:
        return TaskStatus.COMPLETED if self.completed else TaskStatus.ACTIVE

    # ---- transitions (each returns a new value) ----

    def mark_completed(self, at: datetime) -> Task:
        return replace(self, completed=True, completion_date=at)

    def mark_restored(self) -> Task:
        return replace(self, completed=False, completion_date=None)

    def mark_active(self) -> Task:
        """Fresh-task form: not completed, no completion date."""
        if not self.completed and self.completion_date is None:
            return self
        return replace(self, completed=False, completion_date=None)

    def with_edits(self, updated: Task) -> Task:
        """
        Take every editable field from `updated`.

        id, completed and completion_date always come from self.
        """
        return replace(
            updated,
            id=self.id,
            completed=self.completed,
            completion_date=self.completion_date,
        )
