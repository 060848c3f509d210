# src/safedate/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum

from ..core.datemath import Clock, to_epoch_ms
from ..core.ports import AlertSink, KeyValueStore, TaskNotifier
from ..errors import LoadFailure, SaveFailure
from ..notifications.models import ScheduleReport
from .task_codec import decode_tasks, encode_tasks
from .task_models import Task, TaskDraft

logger = logging.getLogger(__name__)


class ChangeKind(StrEnum):
    LOADED = "loaded"
    ADDED = "added"
    EDITED = "edited"
    COMPLETED = "completed"
    RESTORED = "restored"
    DELETED = "deleted"


@dataclass(slots=True, frozen=True)
class TaskChange:
    """
    Result of one store operation.

    applied=False means the target id was not found and nothing was written.
    error carries the save/load failure message; the in-memory change (if any)
    stays in place either way.
    """

    kind: ChangeKind
    task: Task | None = None
    applied: bool = True
    error: str | None = None
    notifications: ScheduleReport | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


ChangeListener = Callable[[TaskChange], None]


class TaskStore:
    """
    In-memory task collection mirrored to a key-value store.

    The collection here is authoritative; the persisted copy is rewritten
    whole after every mutation. A failed write is reported (alert + error in
    the returned TaskChange) but never rolled back.

    Notifications are scheduled on add and edit. Previously scheduled
    notifications are never cancelled (edit/complete/restore/delete).
    """

    def __init__(
            self,
            kv: KeyValueStore,
            *,
            notifier: TaskNotifier | None = None,
            alerts: AlertSink | None = None,
            storage_key: str = "tasks",
            clock: Clock = datetime.now,
    ) -> None:
        self._kv = kv
        self._notifier = notifier
        self._alerts = alerts
        self._key = storage_key
        self._clock = clock
        self._tasks: list[Task] = []
        self._listeners: list[ChangeListener] = []

    # ---- read API ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def get(self, task_id: int) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx]

    def active_tasks(self) -> list[Task]:
        return [t for t in self._tasks if not t.completed]

    def completed_tasks(self) -> list[Task]:
        return [t for t in self._tasks if t.completed]

    # ---- change notification ----

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, change: TaskChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Task change listener failed kind=%s", change.kind.value)

    # ---- low-level helpers ----

    def _index_of(self, task_id: int) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _new_id(self, now: datetime) -> int:
        candidate = to_epoch_ms(now)
        ids = {t.id for t in self._tasks}
        if candidate in ids:
            candidate = max(ids) + 1
        return candidate

    def _alert(self, title: str, message: str) -> None:
        if self._alerts is None:
            return
        try:
            self._alerts.alert(title, message)
        except Exception:
            logger.exception("Alert sink failed title=%s", title)

    def _schedule(self, task: Task) -> ScheduleReport | None:
        if self._notifier is None:
            return None
        try:
            return self._notifier.schedule_task(task)
        except Exception:
            # Scheduling problems are never surfaced to the user.
            logger.exception("Notification scheduling failed task_id=%s", task.id)
            return None

    def _commit(self, kind: ChangeKind, task: Task, *, schedule: bool = False) -> TaskChange:
        error: str | None = None
        try:
            self.persist()
        except SaveFailure as e:
            error = str(e)
            self._alert("Error", "Failed to save tasks")

        report = self._schedule(task) if schedule else None
        change = TaskChange(kind=kind, task=task, error=error, notifications=report)
        logger.debug("Task %s id=%s saved=%s", kind.value, task.id, error is None)
        self._emit(change)
        return change

    # ---- lifecycle ----

    def create(self, draft: TaskDraft) -> TaskChange:
        """Validate user input and add it as a new task with a fresh id."""
        task = draft.to_task(self._new_id(self._clock()))
        return self.add(task)

    def add(self, task: Task) -> TaskChange:
        task = task.mark_active()
        if self._index_of(task.id) is not None:
            new_id = self._new_id(self._clock())
            logger.warning("Task id %s already in use; assigned %s", task.id, new_id)
            task = replace(task, id=new_id)

        self._tasks = [*self._tasks, task]
        logger.info("Task added id=%s name=%r", task.id, task.name)
        return self._commit(ChangeKind.ADDED, task, schedule=True)

    def edit(self, updated: Task) -> TaskChange:
        idx = self._index_of(updated.id)
        if idx is None:
            logger.debug("edit: task %s not found", updated.id)
            return TaskChange(kind=ChangeKind.EDITED, applied=False)

        task = self._tasks[idx].with_edits(updated)
        self._tasks = [*self._tasks[:idx], task, *self._tasks[idx + 1:]]
        logger.info("Task edited id=%s", task.id)
        return self._commit(ChangeKind.EDITED, task, schedule=True)

    def complete(self, task_id: int) -> TaskChange:
        return self._transition(
            task_id, ChangeKind.COMPLETED, lambda t: t.mark_completed(self._clock())
        )

    def restore(self, task_id: int) -> TaskChange:
        return self._transition(task_id, ChangeKind.RESTORED, lambda t: t.mark_restored())

    def _transition(self, task_id: int, kind: ChangeKind, fn: Callable[[Task], Task]) -> TaskChange:
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("%s: task %s not found", kind.value, task_id)
            return TaskChange(kind=kind, applied=False)

        task = fn(self._tasks[idx])
        self._tasks = [*self._tasks[:idx], task, *self._tasks[idx + 1:]]
        logger.info("Task %s id=%s", kind.value, task_id)
        return self._commit(kind, task)

    def delete(self, task_id: int) -> TaskChange:
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("delete: task %s not found", task_id)
            return TaskChange(kind=ChangeKind.DELETED, applied=False)

        task = self._tasks[idx]
        self._tasks = [*self._tasks[:idx], *self._tasks[idx + 1:]]
        logger.info("Task deleted id=%s", task_id)
        return self._commit(ChangeKind.DELETED, task)

    # ---- persistence ----

    def load(self) -> TaskChange:
        """
        Replace the collection with the persisted copy.

        Missing key -> empty collection. Unreadable data -> empty collection,
        an alert, and the error in the returned change (nothing is salvaged).
        """
        error: str | None = None
        try:
            raw = self._kv.get_item(self._key)
            self._tasks = _with_unique_ids(decode_tasks(raw)) if raw else []
            logger.info("Loaded %d tasks key=%s", len(self._tasks), self._key)
        except LoadFailure as e:
            logger.error("Error loading tasks: %s", e)
            error = str(e)
        except Exception as e:
            logger.exception("Error loading tasks key=%s", self._key)
            error = str(LoadFailure(f"Failed to read stored tasks: {e}"))

        if error is not None:
            self._tasks = []
            self._alert("Error", "Failed to load tasks")

        change = TaskChange(kind=ChangeKind.LOADED, error=error)
        self._emit(change)
        return change

    def persist(self, tasks: list[Task] | tuple[Task, ...] | None = None) -> None:
        """Write the whole collection (or `tasks`) under the storage key."""
        items = self._tasks if tasks is None else tasks
        try:
            payload = encode_tasks(items)
            self._kv.set_item(self._key, payload)
        except Exception as e:
            logger.exception("Error saving tasks key=%s", self._key)
            raise SaveFailure(f"Failed to save tasks: {e}") from e


def _with_unique_ids(tasks: list[Task]) -> list[Task]:
    """Later records whose id is already taken get max(ids) + 1."""
    seen: set[int] = set()
    out: list[Task] = []
    for task in tasks:
        if task.id in seen:
            new_id = max(seen | {t.id for t in tasks}) + 1
            logger.warning("Stored task id %s is duplicated; assigned %s", task.id, new_id)
            task = replace(task, id=new_id)
        seen.add(task.id)
        out.append(task)
    return out
