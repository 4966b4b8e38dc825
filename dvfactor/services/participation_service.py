"""Enrollment of users into editions."""
from __future__ import annotations

from sqlalchemy.orm import Session

from dvfactor.core.errors import DuplicateRecordError, NotFoundError
from dvfactor.core.log import get_logger, log_context
from dvfactor.domain.editions import ensure_open
from dvfactor.models import EditionParticipant
from dvfactor.repositories import EditionRepository, ParticipantRepository, ProfileRepository

LOGGER = get_logger(__name__)


class ParticipationService:
    """Get-or-create semantics for the (user, edition) participant record."""

    def __init__(
        self,
        session: Session,
        editions: EditionRepository | None = None,
        participants: ParticipantRepository | None = None,
        profiles: ProfileRepository | None = None,
    ) -> None:
        self._editions = editions or EditionRepository(session)
        self._participants = participants or ParticipantRepository(session)
        self._profiles = profiles or ProfileRepository(session)

    def get_participation(self, user_id: str, edition_id: int) -> EditionParticipant | None:
        return self._participants.get_for_user(user_id, edition_id)

    def list_participants(self, edition_id: int) -> list[EditionParticipant]:
        if self._editions.get(edition_id) is None:
            raise NotFoundError("Edition not found", edition_id=edition_id)
        return self._participants.list_for_edition(edition_id)

    def enroll(self, user_id: str, edition_id: int, *, email: str | None = None) -> EditionParticipant:
        """Return the participant record of ``user_id``, creating it on first visit."""

        existing = self._participants.get_for_user(user_id, edition_id)
        if existing is not None:
            return existing

        edition = self._editions.get(edition_id)
        if edition is None:
            raise NotFoundError("Edition not found", edition_id=edition_id)
        ensure_open(edition.status, action="accepting participants", edition_id=edition_id)

        with log_context.scope(edition_id=edition_id, user_id=user_id):
            self._profiles.ensure(user_id, email=email)
            try:
                participant = self._participants.create(user_id, edition_id, edition.entry_fee)
                self._participants.commit(user_id=user_id, edition_id=edition_id)
            except DuplicateRecordError:
                # Lost a race with a parallel first visit; the other record wins.
                participant = self._participants.get_for_user(user_id, edition_id)
                if participant is None:
                    raise
                return participant
            LOGGER.info("Participant enrolled with payment amount %s", participant.payment_amount)
            return participant
