"""Edition creation and lifecycle."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from dvfactor.core.errors import NotFoundError
from dvfactor.core.log import get_logger, log_context
from dvfactor.domain.editions import EditionStatus, ensure_transition
from dvfactor.domain.money import to_money
from dvfactor.models import GameEdition
from dvfactor.repositories import EditionRepository

LOGGER = get_logger(__name__)


class EditionService:
    """Administrator-driven management of editions."""

    def __init__(self, session: Session, editions: EditionRepository | None = None) -> None:
        self._editions = editions or EditionRepository(session)

    def get_edition(self, edition_id: int) -> GameEdition:
        edition = self._editions.get(edition_id)
        if edition is None:
            raise NotFoundError("Edition not found", edition_id=edition_id)
        return edition

    def get_current_edition(self) -> GameEdition | None:
        return self._editions.get_current()

    def list_editions(self) -> list[GameEdition]:
        return self._editions.list_editions()

    def create_edition(
        self,
        *,
        year: int,
        entry_fee: Decimal,
        start_date: date,
        end_date: date,
        jackpot: Decimal = Decimal("0"),
        betting_deadline: date | None = None,
    ) -> GameEdition:
        """Open a new edition; its pool starts at the jackpot."""

        entry_fee = to_money(entry_fee)
        jackpot = to_money(jackpot)
        if entry_fee < 0 or jackpot < 0:
            raise ValueError("entry_fee and jackpot must not be negative")
        if start_date > end_date:
            raise ValueError("start_date must not be after end_date")
        if betting_deadline is not None and not start_date <= betting_deadline <= end_date:
            raise ValueError("betting_deadline must fall between start_date and end_date")

        edition = GameEdition(
            year=year,
            entry_fee=entry_fee,
            jackpot=jackpot,
            start_date=start_date,
            end_date=end_date,
            betting_deadline=betting_deadline,
            status=EditionStatus.OPEN,
            total_pool=jackpot,
        )
        self._editions.add(edition)
        self._editions.commit(year=year)
        LOGGER.info("Edition %s created for %s with jackpot %s", edition.id, year, jackpot)
        return edition

    def transition(self, edition_id: int, target: EditionStatus | str) -> GameEdition:
        edition = self.get_edition(edition_id)
        with log_context.scope(edition_id=edition_id):
            new_status = ensure_transition(edition.status, target, edition_id=edition_id)
            previous = EditionStatus(edition.status)
            edition.status = new_status
            self._editions.commit(edition_id=edition_id)
            LOGGER.info("Edition moved from %s to %s", previous.value, new_status.value)
            return edition
