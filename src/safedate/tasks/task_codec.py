# src/safedate/tasks/task_codec.py

"""
Serialized form of the task collection.

The whole collection lives under one key as a JSON array of records:

    {"id": 1735689600000, "name": "...", "description": "...",
     "deadlineDate": "2025-01-10T00:00:00.000+00:00",
     "safeDate": "2025-01-05T00:00:00.000+00:00",
     "completed": false}

completionDate is present only while the task is completed.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from ..core.datemath import format_iso, parse_iso
from ..errors import LoadFailure
from .task_models import Task


def task_to_record(task: Task) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": int(task.id),
        "name": task.name,
        "description": task.description,
        "deadlineDate": format_iso(task.deadline_date),
        "safeDate": format_iso(task.safe_date),
        "completed": bool(task.completed),
    }
    if task.completion_date is not None:
        record["completionDate"] = format_iso(task.completion_date)
    return record


def task_from_record(record: Any) -> Task:
    """
    Rebuild a Task from its record.

    Raises ValueError/TypeError/KeyError on malformed input; callers turn
    those into LoadFailure.
    """
    if not isinstance(record, dict):
        raise TypeError(f"task record must be an object, got {type(record).__name__}")

    raw_id = record["id"]
    if isinstance(raw_id, bool) or not isinstance(raw_id, (int, float, str)):
        raise TypeError(f"bad task id: {raw_id!r}")

    completed = record.get("completed", False)
    if not isinstance(completed, bool):
        raise TypeError(f"bad completed flag: {completed!r}")
    raw_completion = record.get("completionDate")
    completion_date = parse_iso(raw_completion) if (completed and raw_completion) else None

    return Task(
        id=int(raw_id),
        name=str(record.get("name") or ""),
        description=str(record.get("description") or ""),
        deadline_date=parse_iso(record["deadlineDate"]),
        safe_date=parse_iso(record["safeDate"]),
        completed=completed,
        completion_date=completion_date,
    )


def encode_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps([task_to_record(t) for t in tasks], ensure_ascii=False)


def decode_tasks(payload: str) -> list[Task]:
    try:
        data = json.loads(payload)
        if not isinstance(data, list):
            raise TypeError(f"stored tasks must be a list, got {type(data).__name__}")
        return [task_from_record(item) for item in data]
    except (ValueError, TypeError, KeyError) as e:
        raise LoadFailure(f"Stored tasks are unreadable: {e}") from e
