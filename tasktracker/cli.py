from __future__ import annotations

import argparse
import sys
from typing import TextIO

from tasktracker.config import TrackerConfig, load_config
from tasktracker.errors import (
    DueDateParseError,
    InvalidTaskError,
    PriorityParseError,
    TaskIdParseError,
    TaskNotFoundError,
)
from tasktracker.manager import TaskManager, fixed_clock, system_clock
from tasktracker.observability import get_json_logger, parse_level
from tasktracker.parsing import DUE_DATE_FORMAT, parse_due_date, parse_priority, parse_task_id

MENU = """
===== Task Manager Menu =====
1. Add Task
2. Mark Task Completed (by ID)
3. List Tasks by Priority
4. List Overdue Tasks
5. Remove Task (by ID)
6. Exit
============================="""


class TaskMenu:
    """Interactive text menu driving a ``TaskManager``.

    Reads one answer per line from ``stdin``; end of input behaves like Exit.
    """

    def __init__(
        self,
        manager: TaskManager,
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self._manager = manager
        self._in = stdin or sys.stdin
        self._out = stdout or sys.stdout

    def _say(self, text: str = "") -> None:
        self._out.write(text + "\n")

    def _ask(self, prompt: str) -> str | None:
        self._out.write(prompt)
        self._out.flush()
        line = self._in.readline()
        if not line:
            return None
        return line.rstrip("\n")

    def run(self) -> int:
        actions = {
            "1": self.add_task,
            "2": self.mark_completed,
            "3": self.list_by_priority,
            "4": self.list_overdue,
            "5": self.remove_task,
        }
        while True:
            self._say(MENU)
            choice = self._ask("Enter your choice: ")
            if choice is None or choice.strip() == "6":
                self._say("Exiting Task Manager. Goodbye!")
                return 0
            action = actions.get(choice.strip())
            if action is None:
                self._say("Invalid option. Please enter a number between 1 and 6.")
                continue
            action()

    # ----------------------------
    # Menu actions
    # ----------------------------
    def add_task(self) -> None:
        self._say("\n--- Add New Task ---")
        description = self._ask("Description: ")
        priority_text = self._ask("Priority (LOW, MEDIUM, HIGH): ")
        date_text = self._ask(f"Due Date ({DUE_DATE_FORMAT}): ")
        try:
            priority = parse_priority(priority_text)
            due_date = parse_due_date(date_text)
            task_id = self._manager.add_task(description, priority, due_date)
        except PriorityParseError as e:
            self._say(f"Failed to add task: {e}")
            self._say("Tip: Priority must be LOW, MEDIUM, or HIGH.")
            return
        except DueDateParseError:
            self._say(f"Failed to add task: Invalid date format. Please use {DUE_DATE_FORMAT}.")
            return
        except InvalidTaskError as e:
            self._say(f"Failed to add task: {e.reason}")
            return
        self._say(f"Task added successfully! ID: {task_id}")

    def mark_completed(self) -> None:
        self._say("\n--- Mark Task Completed ---")
        try:
            task_id = parse_task_id(self._ask("Enter Task ID to mark completed: "))
            new_id = self._manager.mark_task_completed(task_id)
        except TaskIdParseError:
            self._say("Invalid input. Please enter a number for the Task ID.")
            return
        except TaskNotFoundError as e:
            self._say(f"Task not found. {e}")
            return
        self._say(f"Task ID {task_id} marked as completed. New ID: {new_id}")

    def list_by_priority(self) -> None:
        self._say("\n--- List by Priority ---")
        try:
            priority = parse_priority(self._ask("Enter Priority to list (LOW, MEDIUM, HIGH): "))
        except PriorityParseError:
            self._say("Invalid priority. Please enter LOW, MEDIUM, or HIGH.")
            return
        tasks = self._manager.get_tasks_by_priority(priority)
        if not tasks:
            self._say(f"No {priority.value} priority tasks found.")
            return
        self._say(f"\n{priority.value} Priority Tasks (Sorted by Due Date):")
        for task in tasks:
            self._say(str(task))

    def list_overdue(self) -> None:
        tasks = self._manager.get_overdue_tasks()
        if not tasks:
            self._say("\nNo incomplete tasks are currently overdue!")
            return
        self._say("\nOverdue Tasks (Sorted High to Low Priority):")
        for task in tasks:
            self._say(str(task))

    def remove_task(self) -> None:
        self._say("\n--- Remove Task ---")
        try:
            task_id = parse_task_id(self._ask("Enter Task ID to remove: "))
            self._manager.remove_task(task_id)
        except TaskIdParseError:
            self._say("Invalid input. Please enter a number for the Task ID.")
            return
        except TaskNotFoundError as e:
            self._say(f"Error: {e}")
            return
        self._say(f"Task ID {task_id} removed successfully.")


def build_manager(config: TrackerConfig) -> TaskManager:
    clock = fixed_clock(config.today) if config.today else system_clock(config.timezone)
    return TaskManager(clock=clock)


def _apply_log_level(level: str) -> None:
    lvl = parse_level(level)
    for name in ("tasktracker.manager", "tasktracker.tools"):
        get_json_logger(name).setLevel(lvl)


def main(
    argv: list[str] | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    parser = argparse.ArgumentParser("tasktracker")
    parser.add_argument(
        "--log-level", choices=["debug", "info", "warning", "error"], default=None
    )
    parser.add_argument("--timezone", help="IANA zone used for 'today' (default: local)")
    parser.add_argument("--today", help=f"Pin today's date ({DUE_DATE_FORMAT})")
    args = parser.parse_args(argv)

    overrides: dict[str, str] = {}
    if args.timezone:
        overrides["TASKS_TIMEZONE"] = args.timezone
    if args.today:
        try:
            parse_due_date(args.today)
        except DueDateParseError as e:
            parser.error(str(e))
        overrides["TASKS_TODAY"] = args.today
    if args.log_level:
        overrides["LOG_LEVEL"] = args.log_level
    config = load_config(overrides)

    _apply_log_level(config.log_level)
    menu = TaskMenu(build_manager(config), stdin=stdin, stdout=stdout)
    return menu.run()


__all__ = ["TaskMenu", "build_manager", "main"]
