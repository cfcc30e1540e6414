from __future__ import annotations

import datetime as dt
import threading
from concurrent.futures import ThreadPoolExecutor

from tasktracker.errors import TaskNotFoundError
from tasktracker.manager import TaskManager
from tasktracker.models.ids import IdGenerator
from tasktracker.models.task import Priority, Task

PRIORITIES = list(Priority)


def test_concurrent_adds_get_distinct_ids(manager: TaskManager, store: dict[int, Task]) -> None:
    def add(i: int) -> int:
        return manager.add_task(f"task {i}", PRIORITIES[i % 3], dt.date(2020, 1, 1 + i % 28))

    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(add, range(400)))

    assert len(set(ids)) == 400
    assert len(store) == 400
    assert set(store) == set(ids)


def test_concurrent_remove_has_one_winner(manager: TaskManager) -> None:
    tid = manager.add_task("contested", Priority.HIGH, dt.date(2020, 1, 1))
    barrier = threading.Barrier(6)
    results: list[str] = []
    lock = threading.Lock()

    def remove() -> None:
        barrier.wait()
        try:
            manager.remove_task(tid)
            outcome = "removed"
        except TaskNotFoundError:
            outcome = "missing"
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=remove) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("removed") == 1
    assert results.count("missing") == 5
    assert len(manager) == 0


def test_queries_survive_concurrent_writers(manager: TaskManager) -> None:
    stop = threading.Event()
    errors: list[BaseException] = []

    def writer() -> None:
        i = 0
        while not stop.is_set():
            tid = manager.add_task(f"w{i}", PRIORITIES[i % 3], dt.date(2000, 1, 1))
            if i % 2:
                manager.mark_task_completed(tid)
            else:
                manager.remove_task(tid)
            i += 1

    def reader() -> None:
        try:
            for _ in range(300):
                for task in manager.get_overdue_tasks():
                    assert not task.completed
                for p in PRIORITIES:
                    assert all(t.priority is p for t in manager.get_tasks_by_priority(p))
        except BaseException as exc:  # noqa: BLE001
            errors.append(exc)

    writers = [threading.Thread(target=writer) for _ in range(3)]
    readers = [threading.Thread(target=reader) for _ in range(3)]
    for t in writers + readers:
        t.start()
    for t in readers:
        t.join()
    stop.set()
    for t in writers:
        t.join()

    assert errors == []


def test_completion_leaves_a_window_where_the_task_is_absent(
    manager: TaskManager, store: dict[int, Task], ids: IdGenerator
) -> None:
    """Completion is remove-then-insert, not one atomic step.

    A hook on the store's insert shows that between the two steps the lineage
    is not in the store under any ID. This is accepted behaviour; readers must
    tolerate it.
    """
    tid = manager.add_task("task", Priority.HIGH, dt.date(2020, 1, 1))
    observed: list[int] = []

    class _WatchingStore(dict[int, Task]):
        def __setitem__(self, key: int, value: Task) -> None:
            observed.append(len(self))
            super().__setitem__(key, value)

    watching = _WatchingStore(store)
    racy = TaskManager(id_generator=ids, tasks=watching)

    new_id = racy.mark_task_completed(tid)

    assert observed == [0]
    assert list(watching) == [new_id]
