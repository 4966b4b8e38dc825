"""FastAPI dependencies shared by the routers."""
from __future__ import annotations

from collections.abc import Iterator
from functools import lru_cache

from sqlalchemy.orm import Session, sessionmaker

from dvfactor.db.session import get_sessionmaker


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    """Engine and factory are built on the first request, not at import time."""

    return get_sessionmaker()


def get_db_session() -> Iterator[Session]:
    """One session per request, closed once the response is sent."""

    with get_session_factory()() as session:
        yield session
