from __future__ import annotations

import datetime as _dt
from typing import Any

from tasktracker.errors import (
    DuplicateTaskIdError,
    InputParseError,
    InvalidTaskError,
    TaskNotFoundError,
    TaskTrackerError,
)
from tasktracker.manager import TaskManager
from tasktracker.models.task import Priority, Task
from tasktracker.observability import get_json_logger
from tasktracker.parsing import parse_due_date, parse_priority, parse_task_id

# Plain callables returning JSON-ready dicts. Caller-recoverable failures come
# back as {"error": ..., "kind": ...} instead of raising.


def _serialize_task(task: Task) -> dict[str, Any]:
    return task.model_dump(mode="json")


def _error_kind(exc: TaskTrackerError) -> str:
    if isinstance(exc, InvalidTaskError):
        return "invalid_task"
    if isinstance(exc, TaskNotFoundError):
        return "task_not_found"
    if isinstance(exc, DuplicateTaskIdError):
        return "duplicate_id"
    if isinstance(exc, InputParseError):
        return "invalid_input"
    return "error"


def _error(result: dict[str, Any], exc: TaskTrackerError, tool: str) -> dict[str, Any]:
    kind = _error_kind(exc)
    logger = get_json_logger("tasktracker.tools")
    log = logger.error if kind == "duplicate_id" else logger.info
    log(
        "tool error",
        extra={"event": "tool_error", "kind": kind, "attributes": {"tool": tool}},
    )
    return {**result, "error": str(exc), "kind": kind}


def _coerce_priority(value: Priority | str | None) -> Priority | None:
    if value is None or isinstance(value, Priority):
        return value
    return parse_priority(value)


def _coerce_date(value: _dt.date | str | None) -> _dt.date | None:
    if value is None or isinstance(value, _dt.date):
        return value
    return parse_due_date(value)


def _coerce_id(value: int | str) -> int:
    return value if isinstance(value, int) else parse_task_id(value)


def add_task_tool(
    manager: TaskManager,
    description: str | None,
    priority: Priority | str | None,
    due_date: _dt.date | str | None,
) -> dict[str, Any]:
    try:
        tid = manager.add_task(description, _coerce_priority(priority), _coerce_date(due_date))
    except TaskTrackerError as e:
        return _error({"task_id": None}, e, "tasks.add")
    return {"task_id": tid}


def complete_task_tool(manager: TaskManager, task_id: int | str) -> dict[str, Any]:
    try:
        old_id = _coerce_id(task_id)
        new_id = manager.mark_task_completed(old_id)
    except TaskTrackerError as e:
        return _error({"task_id": None}, e, "tasks.complete")
    return {"task_id": new_id, "previous_task_id": old_id}


def remove_task_tool(manager: TaskManager, task_id: int | str) -> dict[str, Any]:
    try:
        task = manager.remove_task(_coerce_id(task_id))
    except TaskTrackerError as e:
        return _error({"task": None}, e, "tasks.remove")
    return {"task": _serialize_task(task)}


def list_by_priority_tool(manager: TaskManager, priority: Priority | str) -> dict[str, Any]:
    try:
        parsed = _coerce_priority(priority)
    except TaskTrackerError as e:
        return _error({"tasks": []}, e, "tasks.by_priority")
    if parsed is None:
        return {"tasks": [], "error": "priority is required", "kind": "invalid_input"}
    return {"tasks": [_serialize_task(t) for t in manager.get_tasks_by_priority(parsed)]}


def list_overdue_tool(
    manager: TaskManager, now: _dt.date | str | None = None
) -> dict[str, Any]:
    try:
        today = _coerce_date(now)
    except TaskTrackerError as e:
        return _error({"tasks": []}, e, "tasks.overdue")
    return {"tasks": [_serialize_task(t) for t in manager.get_overdue_tasks(today)]}


__all__ = [
    "add_task_tool",
    "complete_task_tool",
    "remove_task_tool",
    "list_by_priority_tool",
    "list_overdue_tool",
]
