from __future__ import annotations

import datetime as _dt
import re

from tasktracker.errors import DueDateParseError, PriorityParseError, TaskIdParseError
from tasktracker.models.task import Priority

DUE_DATE_FORMAT = "YYYY-MM-DD"

_DUE_DATE_RE = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})$")
_TASK_ID_RE = re.compile(r"^[+-]?[0-9]+$")


def parse_priority(text: str | None) -> Priority:
    """Case-insensitive match against HIGH, MEDIUM and LOW."""
    raw = (text or "").strip().upper()
    try:
        return Priority(raw)
    except ValueError:
        choices = ", ".join(p.value for p in Priority)
        raise PriorityParseError(f"Invalid priority {text!r}; expected one of {choices}.") from None


def parse_due_date(text: str | None) -> _dt.date:
    raw = (text or "").strip()
    m = _DUE_DATE_RE.match(raw)
    if m is None:
        raise DueDateParseError(f"Invalid date format {text!r}; use {DUE_DATE_FORMAT}.")
    year, month, day = (int(g) for g in m.groups())
    try:
        return _dt.date(year, month, day)
    except ValueError as exc:
        raise DueDateParseError(f"Invalid date {raw!r}: {exc}.") from exc


def parse_task_id(text: str | None) -> int:
    raw = (text or "").strip()
    if not _TASK_ID_RE.match(raw):
        raise TaskIdParseError(f"Invalid task ID {text!r}; enter a number.")
    return int(raw)


__all__ = ["DUE_DATE_FORMAT", "parse_priority", "parse_due_date", "parse_task_id"]
