from __future__ import annotations

from .ids import IdGenerator, get_id_generator, reset_id_generator_for_testing
from .task import Priority, Task, TaskBuilder, TaskFields, create_task, derive_from

__all__ = [
    "IdGenerator",
    "get_id_generator",
    "reset_id_generator_for_testing",
    "Priority",
    "Task",
    "TaskBuilder",
    "TaskFields",
    "create_task",
    "derive_from",
]
