"""Duration logging for service operations, with optional SQL statement counts."""
from __future__ import annotations

import logging
from contextlib import contextmanager, nullcontext
from time import perf_counter
from typing import Iterator

from sqlalchemy import event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import Session


class _StatementCounter:
    """Counts statements the session itself sends while the block runs.

    The listener sits on the engine but ignores every connection other than
    the one the session holds on entry. Statements issued after a commit
    inside the block run on a fresh connection and are not counted.
    """

    def __init__(self, session: Session) -> None:
        bind = session.get_bind()
        self.engine = bind if isinstance(bind, Engine) else None
        self.connection = session.connection() if self.engine is not None else None
        self.count = 0

    def _count(self, conn: Connection, *_: object) -> None:
        if conn is self.connection:
            self.count += 1

    def __enter__(self) -> "_StatementCounter":
        if self.engine is not None:
            event.listen(self.engine, "before_cursor_execute", self._count)
        return self

    def __exit__(self, *_: object) -> None:
        if self.engine is not None and event.contains(self.engine, "before_cursor_execute", self._count):
            event.remove(self.engine, "before_cursor_execute", self._count)


class Timer:
    """Handle yielded by ``timeit``; callers report how many items they handled."""

    def __init__(self, unit: str, total: int | None) -> None:
        self.unit = unit
        self.total = total
        self.started = perf_counter()

    def set_total(self, total: int) -> None:
        self.total = total

    @property
    def elapsed(self) -> float:
        return perf_counter() - self.started

    def describe(self, statements: int) -> str:
        parts = [f"{self.elapsed:.3f}s"]
        if self.total:
            parts.append(f"{self.total:,} {self.unit}")
        if statements:
            parts.append(f"{statements:,} SQL statements")
        return ", ".join(parts)


@contextmanager
def timeit(
    label: str,
    *,
    logger: logging.Logger | None = None,
    level: int = logging.DEBUG,
    unit: str = "items",
    total: int | None = None,
    session: Session | None = None,
) -> Iterator[Timer]:
    """Log how long the block took; failures are logged at ERROR and re-raised."""

    log = logger or logging.getLogger("dvfactor.timing")
    timer = Timer(unit, total)
    counter = _StatementCounter(session) if session is not None else None
    with counter or nullcontext():
        try:
            yield timer
        except Exception:
            log.error("%s failed after %s", label, timer.describe(counter.count if counter else 0))
            raise
    log.log(level, "%s took %s", label, timer.describe(counter.count if counter else 0))
