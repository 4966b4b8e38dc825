"""Shared helpers for repositories."""
from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Iterator

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.orm import Session

from dvfactor.core.errors import DataStoreUnavailableError
from dvfactor.core.log import get_logger

LOGGER = get_logger(__name__)


class BaseRepository:
    """Base repository providing session access and error translation."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @contextmanager
    def _guard(self, action: str, **context: object) -> Iterator[None]:
        """Turn connectivity failures into ``DataStoreUnavailableError``."""

        try:
            yield
        except (OperationalError, InterfaceError) as exc:
            LOGGER.warning("Data store unavailable while %s: %s", action, exc.orig)
            raise DataStoreUnavailableError(
                f"Data store unavailable while {action}", **context
            ) from exc
        except DBAPIError as exc:
            if exc.connection_invalidated:
                raise DataStoreUnavailableError(
                    f"Connection lost while {action}", **context
                ) from exc
            raise

    def commit(self, **context: object) -> None:
        """Commit the unit of work, rolling back when the commit fails."""

        try:
            with self._guard("committing", **context):
                self._session.commit()
        except Exception:
            self._session.rollback()
            raise

    def rollback(self) -> None:
        self._session.rollback()

    @staticmethod
    def _to_decimal(value: Any) -> Decimal:
        if isinstance(value, Decimal):
            return value
        if value is None:
            return Decimal(0)
        return Decimal(str(value))
