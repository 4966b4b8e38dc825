"""Data access for edition participants."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from dvfactor.core.errors import DuplicateRecordError
from dvfactor.domain.payouts import ParticipantEntry
from dvfactor.models import EditionParticipant

from .base import BaseRepository


class ParticipantRepository(BaseRepository):
    """Repository for the participant ledger."""

    def get(self, participant_id: int) -> EditionParticipant | None:
        with self._guard("loading participant", participant_id=participant_id):
            return self._session.get(EditionParticipant, participant_id)

    def get_for_user(self, user_id: str, edition_id: int) -> EditionParticipant | None:
        with self._guard("loading participant", user_id=user_id, edition_id=edition_id):
            return self._session.execute(
                select(EditionParticipant).where(
                    EditionParticipant.user_id == user_id,
                    EditionParticipant.game_edition_id == edition_id,
                )
            ).scalar_one_or_none()

    def list_for_edition(self, edition_id: int) -> list[EditionParticipant]:
        with self._guard("listing participants", edition_id=edition_id):
            return list(
                self._session.execute(
                    select(EditionParticipant)
                    .where(EditionParticipant.game_edition_id == edition_id)
                    .order_by(EditionParticipant.created_at, EditionParticipant.id)
                ).scalars()
            )

    def create(self, user_id: str, edition_id: int, payment_amount: Decimal) -> EditionParticipant:
        """Insert a participant; a second record for the pair is rejected."""

        participant = EditionParticipant(
            user_id=user_id,
            game_edition_id=edition_id,
            payment_amount=payment_amount,
            payment_status=False,
            has_bet=False,
        )
        self._session.add(participant)
        try:
            with self._guard("creating participant", user_id=user_id, edition_id=edition_id):
                self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise DuplicateRecordError(
                "Participant already enrolled in this edition",
                user_id=user_id,
                edition_id=edition_id,
            ) from exc
        return participant

    def list_payment_entries(self, edition_id: int) -> list[ParticipantEntry]:
        """Payment state of every participant, as consumed by the pool calculator."""

        with self._guard("reading payments", edition_id=edition_id):
            rows = self._session.execute(
                select(
                    EditionParticipant.user_id,
                    EditionParticipant.payment_amount,
                    EditionParticipant.payment_status,
                ).where(EditionParticipant.game_edition_id == edition_id)
            ).all()
        return [
            ParticipantEntry(
                user_id=row.user_id,
                payment_amount=self._to_decimal(row.payment_amount),
                payment_confirmed=bool(row.payment_status),
            )
            for row in rows
        ]

    def set_payment(
        self,
        participant: EditionParticipant,
        *,
        confirmed: bool,
        payment_date: datetime | None,
    ) -> EditionParticipant:
        participant.payment_status = confirmed
        participant.payment_date = payment_date
        with self._guard("updating payment", participant_id=participant.id):
            self._session.flush()
        return participant

    def mark_has_bet(self, participant: EditionParticipant) -> None:
        if participant.has_bet:
            return
        participant.has_bet = True
        with self._guard("flagging participant bet", participant_id=participant.id):
            self._session.flush()
