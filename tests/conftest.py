from __future__ import annotations

import datetime as dt
import io
import logging
from collections.abc import Generator
from typing import Any

import pytest
from _pytest.terminal import TerminalReporter

from tasktracker.manager import TaskManager, fixed_clock
from tasktracker.models.ids import IdGenerator, reset_id_generator_for_testing
from tasktracker.models.task import Task
from tasktracker.observability import JsonLogFormatter, get_json_logger, reset_metrics

FIXED_TODAY = dt.date(2023, 10, 27)


@pytest.fixture(autouse=True)
def _fresh_globals() -> Generator[None, None, None]:
    """Give every test its own default ID counter and metrics registry."""
    reset_id_generator_for_testing()
    reset_metrics()
    yield


@pytest.fixture()
def ids() -> IdGenerator:
    return IdGenerator()


@pytest.fixture()
def store() -> dict[int, Task]:
    return {}


@pytest.fixture()
def manager(ids: IdGenerator, store: dict[int, Task]) -> TaskManager:
    return TaskManager(id_generator=ids, clock=fixed_clock(FIXED_TODAY), tasks=store)


@pytest.fixture()
def event_log() -> Generator[io.StringIO, None, None]:
    """JSON lines passed by the manager and tools loggers during the test.

    The loggers keep their level, so only records that would reach the real
    handler show up here.
    """
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setFormatter(JsonLogFormatter())
    loggers = [get_json_logger(n) for n in ("tasktracker.manager", "tasktracker.tools")]
    for logger in loggers:
        logger.addHandler(handler)
    yield buf
    for logger in loggers:
        logger.removeHandler(handler)


def pytest_terminal_summary(terminalreporter: TerminalReporter, exitstatus: int) -> None:  # noqa: D401
    """Point at the JSON report for failure details."""
    if getattr(terminalreporter, "_numcollected", 0):
        terminalreporter.write_sep("-", "Failures: reports/pytest-report.json")


def pytest_json_modifyreport(json_report: dict[str, Any]) -> None:
    """Keep only failed or errored tests in the JSON report."""
    tests = json_report.get("tests") or []
    json_report["tests"] = [
        {
            "nodeid": t.get("nodeid"),
            "outcome": t.get("outcome"),
            "longrepr": (t.get("call") or {}).get("longrepr"),
        }
        for t in tests
        if t.get("outcome") in {"failed", "error"}
    ]
    json_report.pop("collectors", None)
