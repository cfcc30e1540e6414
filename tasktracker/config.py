from __future__ import annotations

import datetime as _dt
import os
import zoneinfo
from dataclasses import dataclass
from typing import Any

from tasktracker.errors import DueDateParseError
from tasktracker.parsing import parse_due_date


@dataclass(slots=True)
class TrackerConfig:
    timezone: str | None
    today: _dt.date | None
    log_level: str


def _read_timezone(raw: str | None) -> str | None:
    name = (raw or "").strip()
    if not name:
        return None
    try:
        zoneinfo.ZoneInfo(name)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        # Unknown zone: fall back to the local zone
        return None
    return name


def _read_today(raw: str | None) -> _dt.date | None:
    if not (raw or "").strip():
        return None
    try:
        return parse_due_date(raw)
    except DueDateParseError:
        return None


def load_config(env: dict[str, str] | None = None) -> TrackerConfig:
    e: dict[str, Any] = dict(os.environ)
    if env:
        e.update(env)
    return TrackerConfig(
        timezone=_read_timezone(e.get("TASKS_TIMEZONE")),
        today=_read_today(e.get("TASKS_TODAY")),
        log_level=(e.get("LOG_LEVEL") or "WARNING").strip().upper() or "WARNING",
    )


__all__ = ["TrackerConfig", "load_config"]
