from __future__ import annotations

from .errors import (
    DuplicateTaskIdError,
    InvalidTaskError,
    TaskNotFoundError,
    TaskTrackerError,
)
from .manager import TaskManager, fixed_clock, system_clock
from .models import IdGenerator, Priority, Task, TaskBuilder, create_task, derive_from

__all__ = [
    "DuplicateTaskIdError",
    "IdGenerator",
    "InvalidTaskError",
    "Priority",
    "Task",
    "TaskBuilder",
    "TaskManager",
    "TaskNotFoundError",
    "TaskTrackerError",
    "create_task",
    "derive_from",
    "fixed_clock",
    "system_clock",
]
