from __future__ import annotations

import datetime as _dt
import threading
import zoneinfo
from collections.abc import Callable, MutableMapping

from tasktracker.errors import DuplicateTaskIdError, InvalidTaskError, TaskNotFoundError
from tasktracker.models.ids import IdGenerator, get_id_generator
from tasktracker.models.task import Priority, Task, create_task, derive_from
from tasktracker.observability import get_json_logger, get_metrics

Clock = Callable[[], _dt.date]


def system_clock(timezone: str | None = None) -> Clock:
    """Return a clock reading today's date in ``timezone`` (local zone when None)."""
    tz = zoneinfo.ZoneInfo(timezone) if timezone else None

    def _today() -> _dt.date:
        return _dt.datetime.now(tz).date()

    return _today


def fixed_clock(day: _dt.date) -> Clock:
    def _today() -> _dt.date:
        return day

    return _today


class TaskManager:
    """Owns the ID -> Task store and every operation on it.

    - Tasks are immutable; completing one replaces it with a new task under a
      new ID, and the new ID is returned to the caller
    - Insert is insert-if-absent and remove is remove-or-fail, both under one
      lock, so callers need no locking of their own
    - Queries sort a copy of the values taken under the lock

    ``mark_task_completed`` removes and re-inserts as two separate steps. A
    concurrent reader can see the task missing in between.
    """

    def __init__(
        self,
        *,
        id_generator: IdGenerator | None = None,
        clock: Clock | None = None,
        tasks: MutableMapping[int, Task] | None = None,
    ) -> None:
        self._tasks: MutableMapping[int, Task] = tasks if tasks is not None else {}
        self._lock = threading.Lock()
        self._id_generator = id_generator or get_id_generator()
        self._clock: Clock = clock or system_clock()
        self._logger = get_json_logger("tasktracker.manager")

    # ----------------------------
    # Mutations
    # ----------------------------
    def add_task(
        self,
        description: str | None,
        priority: Priority | None,
        due_date: _dt.date | None,
    ) -> int:
        try:
            task = create_task(description, priority, due_date, id_generator=self._id_generator)
        except InvalidTaskError as exc:
            self._record_invalid(exc)
            raise
        self._insert(task)
        self._logger.info(
            "task added",
            extra={"event": "task_added", "task_id": task.id, "priority": task.priority.value},
        )
        get_metrics().increment("tasks_added", {"priority": task.priority.value})
        return task.id

    def mark_task_completed(self, task_id: int) -> int:
        """Replace task ``task_id`` with a completed copy and return the copy's ID.

        The old ID is retired. Any reference the caller holds must move to the
        returned ID.
        """
        task = self._pop(task_id)
        try:
            completed = derive_from(task, completed=True).build(self._id_generator)
            self._insert(completed)
        except (InvalidTaskError, DuplicateTaskIdError):
            # The original is already gone at this point
            self._logger.error(
                "completed copy could not be stored; original task removed",
                extra={
                    "event": "completion_lost",
                    "task_id": task_id,
                    "attributes": task.model_dump(mode="json"),
                },
            )
            raise
        self._logger.info(
            "task completed",
            extra={"event": "task_completed", "task_id": task_id, "new_task_id": completed.id},
        )
        get_metrics().increment("tasks_completed")
        return completed.id

    def remove_task(self, task_id: int) -> Task:
        task = self._pop(task_id)
        self._logger.info("task removed", extra={"event": "task_removed", "task_id": task_id})
        get_metrics().increment("tasks_removed")
        return task

    # ----------------------------
    # Queries
    # ----------------------------
    def get_task(self, task_id: int) -> Task:
        with self._lock:
            task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def list_tasks(self) -> list[Task]:
        return self._snapshot()

    def get_tasks_by_priority(self, priority: Priority) -> list[Task]:
        """Tasks with ``priority``, earliest due date first."""
        matching = [t for t in self._snapshot() if t.priority == priority]
        return sorted(matching, key=lambda t: t.due_date)

    def get_overdue_tasks(self, now: _dt.date | None = None) -> list[Task]:
        """Incomplete tasks due strictly before ``now``, HIGH priority first.

        ``now`` defaults to the manager's clock.
        """
        today = self._clock() if now is None else now
        if isinstance(today, _dt.datetime):
            today = today.date()
        overdue = [t for t in self._snapshot() if not t.completed and t.due_date < today]
        return sorted(overdue, key=lambda t: t.priority.rank)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    # ----------------------------
    # Internals
    # ----------------------------
    def _snapshot(self) -> list[Task]:
        with self._lock:
            return list(self._tasks.values())

    def _insert(self, task: Task) -> None:
        with self._lock:
            if task.id in self._tasks:
                duplicate = True
            else:
                self._tasks[task.id] = task
                duplicate = False
        if duplicate:
            self._logger.error(
                "generated task id already present in store",
                extra={"event": "duplicate_task_id", "task_id": task.id},
            )
            get_metrics().increment("task_errors", {"kind": "duplicate_id"})
            raise DuplicateTaskIdError(task.id)

    def _pop(self, task_id: int) -> Task:
        with self._lock:
            task = self._tasks.pop(task_id, None)
        if task is None:
            get_metrics().increment("task_errors", {"kind": "task_not_found"})
            raise TaskNotFoundError(task_id)
        return task

    def _record_invalid(self, exc: InvalidTaskError) -> None:
        # Caller error, reported back through the raised exception
        self._logger.info(
            "task rejected", extra={"event": "invalid_task", "attributes": {"reason": exc.reason}}
        )
        get_metrics().increment("task_errors", {"kind": "invalid_task"})


__all__ = ["Clock", "TaskManager", "fixed_clock", "system_clock"]
