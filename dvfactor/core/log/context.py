"""Identifiers bound to the current request or job, rendered on every record."""
from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator, Mapping

_bound: contextvars.ContextVar[Mapping[str, object]] = contextvars.ContextVar("dvfactor_log_context", default={})


def _clean(values: Mapping[str, object]) -> dict[str, object]:
    return {key: value for key, value in values.items() if value is not None}


class LogContext:
    """Key/value pairs such as ``edition_id`` or ``user_id`` for the running task."""

    def as_dict(self) -> dict[str, object]:
        return dict(_bound.get())

    @contextmanager
    def scope(self, **values: object) -> Iterator[None]:
        """Bind ``values`` inside the block and restore the outer context after it."""

        token = _bound.set({**_bound.get(), **_clean(values)})
        try:
            yield
        finally:
            _bound.reset(token)


class ContextFilter(logging.Filter):
    """Sets ``record.context`` to ``"[key=value ...] "`` or an empty string."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "context", None) is None:
            values = _bound.get()
            record.context = (
                "[" + " ".join(f"{key}={value}" for key, value in values.items()) + "] " if values else ""
            )
        return True


log_context = LogContext()
