"""Total pool recalculation and payment confirmation."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from dvfactor.core.errors import NotFoundError
from dvfactor.core.log import get_logger, log_context
from dvfactor.domain.payouts import compute_total_pool
from dvfactor.models import EditionParticipant
from dvfactor.repositories import EditionRepository, ParticipantRepository

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class PaymentUpdate:
    """Result of a payment change: the participant and the refreshed pool."""

    participant: EditionParticipant
    total_pool: Decimal


class PoolService:
    """Keeps ``game_editions.total_pool`` equal to jackpot plus confirmed payments."""

    def __init__(
        self,
        session: Session,
        editions: EditionRepository | None = None,
        participants: ParticipantRepository | None = None,
    ) -> None:
        self._editions = editions or EditionRepository(session)
        self._participants = participants or ParticipantRepository(session)

    def calculate(self, edition_id: int) -> Decimal:
        """Return the pool derived from the current ledger without storing it."""

        edition = self._editions.get(edition_id)
        if edition is None:
            raise NotFoundError("Edition not found", edition_id=edition_id)
        entries = self._participants.list_payment_entries(edition_id)
        return compute_total_pool(edition.jackpot, entries)

    def recalculate(self, edition_id: int) -> Decimal:
        """Recompute, store and return the total pool of ``edition_id``.

        The value is derived from the ledger as it is now, never from deltas,
        so repeated or racing calls converge on the same result.
        """

        with log_context.scope(edition_id=edition_id):
            total = self.calculate(edition_id)
            self._editions.update_total_pool(edition_id, total)
            self._editions.commit(edition_id=edition_id)
            LOGGER.info("Total pool recalculated: %s", total)
            return total


class PaymentService:
    """Administrator actions on participant payments."""

    def __init__(
        self,
        session: Session,
        participants: ParticipantRepository | None = None,
        pool_service: PoolService | None = None,
    ) -> None:
        self._participants = participants or ParticipantRepository(session)
        self._pool = pool_service or PoolService(session, participants=self._participants)

    def _load(self, participant_id: int) -> EditionParticipant:
        participant = self._participants.get(participant_id)
        if participant is None:
            raise NotFoundError("Participant not found", participant_id=participant_id)
        return participant

    def confirm_payment(self, participant_id: int, *, now: datetime | None = None) -> PaymentUpdate:
        participant = self._load(participant_id)
        with log_context.scope(edition_id=participant.game_edition_id, user_id=participant.user_id):
            self._participants.set_payment(
                participant,
                confirmed=True,
                payment_date=now or datetime.now(timezone.utc),
            )
            self._participants.commit(participant_id=participant_id)
            LOGGER.info("Payment confirmed for participant %s", participant_id)
            total = self._pool.recalculate(participant.game_edition_id)
        return PaymentUpdate(participant=participant, total_pool=total)

    def cancel_payment(self, participant_id: int) -> PaymentUpdate:
        participant = self._load(participant_id)
        with log_context.scope(edition_id=participant.game_edition_id, user_id=participant.user_id):
            self._participants.set_payment(participant, confirmed=False, payment_date=None)
            self._participants.commit(participant_id=participant_id)
            LOGGER.info("Payment cancelled for participant %s", participant_id)
            total = self._pool.recalculate(participant.game_edition_id)
        return PaymentUpdate(participant=participant, total_pool=total)
