from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tasktracker.errors import InvalidTaskError

from .ids import IdGenerator, get_id_generator


class Priority(StrEnum):
    """Task priority, declared highest urgency first."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        # 0 is the most urgent
        return _PRIORITY_RANK[self]


_PRIORITY_RANK: dict[Priority, int] = {p: i for i, p in enumerate(Priority)}


class TaskFields(BaseModel):
    """Validated task content, everything except the ID.

    Validation happens here so a builder can reject bad input before it draws
    an ID from the generator.
    """

    model_config = ConfigDict(frozen=True)

    description: str
    priority: Priority
    due_date: _dt.date = Field(strict=True)
    completed: bool = Field(default=False, strict=True)

    @field_validator("description", mode="before")
    @classmethod
    def trim_description(cls, value: Any) -> str:
        if value is None:
            raise ValueError("cannot be null or empty")
        if not isinstance(value, str):
            raise ValueError("must be a string")
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("cannot be null or empty")
        return trimmed

    @field_validator("priority", mode="before")
    @classmethod
    def require_priority(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("cannot be null")
        return value

    @field_validator("due_date", mode="before")
    @classmethod
    def require_plain_date(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("cannot be null")
        if isinstance(value, _dt.datetime):
            raise ValueError("must be a calendar date without a time component")
        return value


class Task(TaskFields):
    """One immutable unit of work.

    Instances never change. Completing a task means building a new one through
    ``to_builder`` and storing it under a fresh ID.

    Build tasks with ``TaskBuilder`` or ``create_task`` only. Calling ``Task(...)``
    directly or ``model_copy(update=...)`` skips the ID generator, so the ID
    is not guaranteed unique.
    """

    id: int = Field(gt=0)

    def to_builder(self, **overrides: Any) -> TaskBuilder:
        return derive_from(self, **overrides)

    def __str__(self) -> str:
        status = "Completed" if self.completed else "Pending"
        return (
            f"Task[ID: {self.id}, Desc: '{self.description}', Priority: {self.priority.value}, "
            f"Due: {self.due_date.isoformat()}, Status: {status}]"
        )


def _validation_reason(exc: ValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or "task"
        cause = (err.get("ctx") or {}).get("error")
        msg = str(cause) if cause is not None else str(err.get("msg", "invalid value"))
        parts.append(f"{field} {msg}")
    return "; ".join(parts) or "invalid task"


@dataclass(slots=True)
class TaskBuilder:
    """Collects task fields and builds a validated ``Task``.

    The builder never carries an ID. ``build`` validates first and only then
    takes the next ID, so rejected input does not consume one.
    """

    description: str | None = None
    priority: Priority | None = None
    due_date: _dt.date | None = None
    completed: bool = False

    def build(self, id_generator: IdGenerator | None = None) -> Task:
        try:
            fields = TaskFields(
                description=self.description,
                priority=self.priority,
                due_date=self.due_date,
                completed=self.completed,
            )
        except ValidationError as exc:
            raise InvalidTaskError(_validation_reason(exc)) from exc
        generator = id_generator or get_id_generator()
        return Task(id=generator.next_id(), **fields.model_dump())


def create_task(
    description: str | None,
    priority: Priority | None,
    due_date: _dt.date | None,
    completed: bool = False,
    *,
    id_generator: IdGenerator | None = None,
) -> Task:
    builder = TaskBuilder(
        description=description, priority=priority, due_date=due_date, completed=completed
    )
    return builder.build(id_generator)


def derive_from(task: Task, **overrides: Any) -> TaskBuilder:
    """Return a builder seeded with ``task``'s content but not its ID."""
    seeded = TaskBuilder(
        description=task.description,
        priority=task.priority,
        due_date=task.due_date,
        completed=task.completed,
    )
    return replace(seeded, **overrides) if overrides else seeded


__all__ = [
    "Priority",
    "TaskFields",
    "Task",
    "TaskBuilder",
    "create_task",
    "derive_from",
]
