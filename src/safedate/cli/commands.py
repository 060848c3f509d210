# src/safedate/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.datemath import format_display, from_epoch_ms, remaining_days, to_local_naive
from ..core.state import AppState
from ..errors import TaskValidationError
from ..stats.engine import compute_stats, format_stats
from ..tasks.task_models import Task, TaskDraft
from ..tasks.task_store import TaskChange

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing helpers ----

def _parse_date(text: str) -> datetime:
    """Accepts 2025-01-10 or a full ISO-8601 moment."""
    raw = text.strip()
    try:
        return to_local_naive(datetime.fromisoformat(raw))
    except ValueError:
        raise TaskValidationError(f"Bad date: {raw!r} (use YYYY-MM-DD)") from None


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


def _parse_draft(text: str) -> TaskDraft:
    """'name | description | deadline | safe date'"""
    fields = [f.strip() for f in text.split("|")]
    if len(fields) != 4:
        raise TaskValidationError("Expected: name | description | deadline | safe date")
    name, description, deadline, safe = fields
    return TaskDraft(
        name=name,
        description=description,
        deadline_date=_parse_date(deadline),
        safe_date=_parse_date(safe),
    ).validate()


def _describe(change: TaskChange, verb: str, task_id: int | None = None) -> str:
    if not change.applied:
        return f"No task with id {task_id}."
    task = change.task
    msg = f"{verb} [{task.id}] {task.name}." if task is not None else f"{verb}."
    if change.notifications is not None:
        report = change.notifications
        msg += f" Notifications scheduled: {report.scheduled}/{report.requested}."
    if change.error:
        msg += " (not saved, see alert)"
    return msg


def _task_line(task: Task, now: datetime) -> str:
    days = remaining_days(task.deadline_date, now)
    return (
        f"[{task.id}] {task.name} - {task.description}\n"
        f"    Deadline: {format_display(task.deadline_date)} ({days} day(s) left)"
        f"  Safe Date: {format_display(task.safe_date)}"
    )


# ---- commands ----

def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.store
    ready = "ON" if state.notifications_ready else "OFF"
    channel = state.notifications.channel
    return (
        "Status:\n"
        f"  Tasks: {len(store.tasks)} ({len(store.active_tasks())} active)\n"
        f"  Notifications: {ready} (channel {channel.id}, importance {channel.importance.name})\n"
        f"  Pending notifications: {len(state.platform.pending())}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.store.active_tasks()
    if not tasks:
        return "No active tasks. Add one with /add."
    now = state.clock()
    return "Task List:\n" + "\n".join(_task_line(t, now) for t in tasks)


def cmd_completed(state: AppState, args: list[str]) -> str:
    tasks = state.store.completed_tasks()
    if not tasks:
        return "No completed tasks."
    lines = ["Completed Tasks:"]
    for t in tasks:
        when = (
            f"Completed on: {format_display(t.completion_date)}"
            if t.completion_date is not None
            else "Completed (date unknown)"
        )
        lines.append(f"[{t.id}] {t.name} - {t.description}\n    {when}")
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add name | description | deadline | safe date
    """
    try:
        draft = _parse_draft(" ".join(args))
    except TaskValidationError as e:
        return str(e)
    return _describe(state.store.create(draft), "Added")


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> name | description | deadline | safe date
    """
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /edit <id> name | description | deadline | safe date"
    try:
        draft = _parse_draft(" ".join(args[1:]))
    except TaskValidationError as e:
        return str(e)
    return _describe(state.store.edit(draft.to_task(task_id)), "Edited", task_id)


def _by_id(name: str, verb: str, op: Callable[[AppState, int], TaskChange]) -> CommandHandler2:
    def handler(state: AppState, args: list[str]) -> str:
        task_id = _parse_id(args)
        if task_id is None:
            return f"Usage: /{name} <id>"
        return _describe(op(state, task_id), verb, task_id)

    return handler


def cmd_stats(state: AppState, args: list[str]) -> str:
    stats = compute_stats(state.store.tasks, state.clock())
    return "STATISTICS\n" + "\n".join(f"  {line}" for line in format_stats(stats))


def cmd_notif(state: AppState, args: list[str]) -> str:
    """
    /notif                 -> pending and delivered notifications
    /notif press <id>      -> simulate pressing a delivered notification
    /notif dismiss <id>    -> simulate dismissing a delivered notification
    """
    platform = state.platform
    if not args:
        pending = platform.pending()
        delivered = platform.delivered()
        lines = [f"Pending notifications: {len(pending)}"]
        for n in pending:
            lines.append(f"  {format_display(from_epoch_ms(n.timestamp_ms))} "
                         f"{from_epoch_ms(n.timestamp_ms):%H:%M} {n.title}: {n.body}")
        lines.append(f"Delivered notifications: {len(delivered)}")
        for n in delivered:
            lines.append(f"  ({n.id}) {n.title}: {n.body}")
        return "\n".join(lines)

    sub = args[0].lower()
    if sub in ("press", "dismiss") and len(args) == 2:
        action = platform.press if sub == "press" else platform.dismiss
        if not action(args[1]):
            return f"No delivered notification with id {args[1]}."
        return f"Notification {args[1]} " + ("pressed." if sub == "press" else "dismissed.")

    return "Usage: /notif | /notif press <id> | /notif dismiss <id>"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task and notification status.")
registry.register("list", cmd_list, help_text="List active tasks.", aliases=["ls"])
registry.register("completed", cmd_completed, help_text="List completed tasks.")
registry.register(
    "add", cmd_add, help_text="Add a task: /add name | description | deadline | safe date."
)
registry.register(
    "edit", cmd_edit, help_text="Edit a task: /edit <id> name | description | deadline | safe date."
)
registry.register(
    "done",
    _by_id("done", "Completed", lambda state, task_id: state.store.complete(task_id)),
    help_text="Mark a task completed: /done <id>.",
    aliases=["complete"],
)
registry.register(
    "restore",
    _by_id("restore", "Restored", lambda state, task_id: state.store.restore(task_id)),
    help_text="Move a completed task back to the list: /restore <id>.",
)
registry.register(
    "delete",
    _by_id("delete", "Deleted", lambda state, task_id: state.store.delete(task_id)),
    help_text="Delete a task permanently: /delete <id>.",
    aliases=["rm"],
)
registry.register("stats", cmd_stats, help_text="Show completion statistics.")
registry.register(
    "notif", cmd_notif, help_text="Notifications: /notif | /notif press <id> | /notif dismiss <id>."
)
