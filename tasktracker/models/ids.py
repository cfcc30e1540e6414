from __future__ import annotations

import threading


class IdGenerator:
    """Thread-safe, monotonically increasing task ID counter.

    IDs start at ``start`` (1 by default) and are never handed out twice by the
    same generator. Every successful task construction consumes exactly one ID,
    whether or not the task ends up in a store.
    """

    def __init__(self, start: int = 1) -> None:
        if start < 1:
            raise ValueError("start must be >= 1")
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value

    def peek(self) -> int:
        """Return the ID the next call to ``next_id`` will hand out."""
        with self._lock:
            return self._next


_DEFAULT_GENERATOR: IdGenerator | None = None
_DEFAULT_LOCK = threading.Lock()


def get_id_generator() -> IdGenerator:
    global _DEFAULT_GENERATOR
    with _DEFAULT_LOCK:
        if _DEFAULT_GENERATOR is None:
            _DEFAULT_GENERATOR = IdGenerator()
        return _DEFAULT_GENERATOR


def reset_id_generator_for_testing(start: int = 1) -> IdGenerator:
    global _DEFAULT_GENERATOR
    with _DEFAULT_LOCK:
        _DEFAULT_GENERATOR = IdGenerator(start)
        return _DEFAULT_GENERATOR


__all__ = ["IdGenerator", "get_id_generator", "reset_id_generator_for_testing"]
