"""Data access for game editions."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from dvfactor.core.errors import DuplicateRecordError
from dvfactor.domain.editions import EditionStatus
from dvfactor.models import GameEdition

from .base import BaseRepository


class EditionRepository(BaseRepository):
    """Repository encapsulating queries on ``game_editions``."""

    def get(self, edition_id: int) -> GameEdition | None:
        with self._guard("loading edition", edition_id=edition_id):
            return self._session.get(GameEdition, edition_id)

    def get_by_year(self, year: int) -> GameEdition | None:
        with self._guard("loading edition", year=year):
            return self._session.execute(
                select(GameEdition).where(GameEdition.year == year)
            ).scalar_one_or_none()

    def get_current(self) -> GameEdition | None:
        """Return the most recent edition that is still open."""

        with self._guard("loading current edition"):
            return (
                self._session.execute(
                    select(GameEdition)
                    .where(GameEdition.status == EditionStatus.OPEN)
                    .order_by(GameEdition.year.desc())
                    .limit(1)
                )
                .scalars()
                .first()
            )

    def list_editions(self) -> list[GameEdition]:
        with self._guard("listing editions"):
            return list(
                self._session.execute(select(GameEdition).order_by(GameEdition.year.desc())).scalars()
            )

    def add(self, edition: GameEdition) -> GameEdition:
        self._session.add(edition)
        try:
            with self._guard("creating edition", year=edition.year):
                self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise DuplicateRecordError("An edition already exists for this year", year=edition.year) from exc
        return edition

    def update_total_pool(self, edition_id: int, total_pool: Decimal) -> None:
        with self._guard("storing total pool", edition_id=edition_id):
            self._session.execute(
                update(GameEdition)
                .where(GameEdition.id == edition_id)
                .values(total_pool=total_pool)
            )

