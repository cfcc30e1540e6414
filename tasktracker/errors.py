from __future__ import annotations


class TaskTrackerError(Exception):
    """Base class for every error raised by tasktracker."""


class InvalidTaskError(TaskTrackerError, ValueError):
    """Task input failed validation. The caller can re-collect input and retry."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TaskNotFoundError(TaskTrackerError, KeyError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task with ID {task_id} not found.")
        self.task_id = task_id

    def __str__(self) -> str:
        # KeyError would otherwise render the message with quotes
        return str(self.args[0])


class DuplicateTaskIdError(TaskTrackerError, RuntimeError):
    """A freshly generated ID is already in the store.

    Only possible if the ID generator was reset or shared incorrectly. Retrying
    with the same generator cannot fix it, so callers should not retry.
    """

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task with id {task_id} already exists")
        self.task_id = task_id


class InputParseError(TaskTrackerError, ValueError):
    """Raw caller text could not be parsed into a task field."""


class PriorityParseError(InputParseError):
    pass


class DueDateParseError(InputParseError):
    pass


class TaskIdParseError(InputParseError):
    pass


__all__ = [
    "TaskTrackerError",
    "InvalidTaskError",
    "TaskNotFoundError",
    "DuplicateTaskIdError",
    "InputParseError",
    "PriorityParseError",
    "DueDateParseError",
    "TaskIdParseError",
]
