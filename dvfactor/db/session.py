"""Session factories for the API and for command line scripts."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session, sessionmaker

from .engine import create_sync_engine


def get_sessionmaker(url: str | None = None, **engine_options) -> sessionmaker:
    """Build a ``sessionmaker`` on a new engine.

    Objects stay usable after commit so that handlers can serialise what a
    service returned without another round trip.
    """

    return sessionmaker(
        bind=create_sync_engine(url, **engine_options),
        autoflush=False,
        expire_on_commit=False,
    )


@contextmanager
def session_scope(url: str | None = None, **engine_options) -> Iterator[Session]:
    """One transaction on a short-lived engine: commit on success, roll back on error."""

    factory = get_sessionmaker(url, **engine_options)
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
        factory.kw["bind"].dispose()
