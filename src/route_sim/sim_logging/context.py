"""Per-thread logging fields, such as the id of the run a worker is driving.

Each RouteSimulator worker enters log_run_context() once; every record it
emits while inside carries ``run_id``. Contexts nest: leaving an inner
log_context() restores the fields of the enclosing one.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any


class LogContext:
    """Thread-local mapping of field name to value."""

    _local = threading.local()

    @classmethod
    def get(cls) -> dict[str, Any]:
        fields: dict[str, Any] | None = getattr(cls._local, "context", None)
        if fields is None:
            fields = cls._local.context = {}
        return fields

    @classmethod
    def set(cls, **kwargs: Any) -> None:
        cls.get().update(kwargs)

    @classmethod
    def replace(cls, fields: dict[str, Any]) -> None:
        cls._local.context = dict(fields)

    @classmethod
    def clear(cls) -> None:
        cls._local.context = {}


class ContextFilter(logging.Filter):
    """Copies the current thread's LogContext onto each record.

    Fields passed explicitly through ``extra=`` are left untouched.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in LogContext.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Add fields to the current thread's records for the duration of the block."""
    outer = dict(LogContext.get())
    LogContext.set(**kwargs)
    try:
        yield
    finally:
        LogContext.replace(outer)


@contextmanager
def log_run_context(run_id: str, **kwargs: Any) -> Iterator[None]:
    with log_context(run_id=run_id, **kwargs):
        yield
