"""Data access for the bet ledger."""
from __future__ import annotations

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from dvfactor.core.log import get_logger
from dvfactor.domain.bets import BetSelection
from dvfactor.domain.payouts import BetEntry
from dvfactor.models import Bet, EditionParticipant

from .base import BaseRepository

LOGGER = get_logger(__name__)


class BetRepository(BaseRepository):
    """Repository for bets, keyed by (user, edition)."""

    def _base_query(self):
        return select(Bet).options(
            selectinload(Bet.employee_1),
            selectinload(Bet.employee_2),
            selectinload(Bet.employee_3),
            selectinload(Bet.chiringuito),
        )

    def get_for_user(self, user_id: str, edition_id: int) -> Bet | None:
        with self._guard("loading bet", user_id=user_id, edition_id=edition_id):
            return self._session.execute(
                self._base_query().where(Bet.user_id == user_id, Bet.game_edition_id == edition_id)
            ).scalar_one_or_none()

    def list_for_edition(self, edition_id: int, *, visible_to: str | None = None) -> list[Bet]:
        """List bets; with ``visible_to`` only revealed bets and that user's own bet."""

        statement = self._base_query().where(Bet.game_edition_id == edition_id)
        if visible_to is not None:
            statement = statement.where(or_(Bet.is_revealed.is_(True), Bet.user_id == visible_to))
        statement = statement.order_by(Bet.created_at.desc(), Bet.id.desc())
        with self._guard("listing bets", edition_id=edition_id):
            return list(self._session.execute(statement).scalars())

    def _apply(self, bet: Bet, selection: BetSelection) -> None:
        bet.employee_1_id, bet.employee_2_id, bet.employee_3_id = selection.employee_ids
        bet.chiringuito_employee_id = selection.bonus_employee_id

    def upsert(self, user_id: str, edition_id: int, selection: BetSelection) -> Bet:
        """Create or overwrite the bet of ``user_id`` for ``edition_id``.

        A concurrent insert for the same pair loses on the unique constraint
        and is replayed as an update, so double submits end in one bet.
        """

        context = {"user_id": user_id, "edition_id": edition_id}
        bet = self.get_for_user(user_id, edition_id)
        if bet is None:
            bet = Bet(user_id=user_id, game_edition_id=edition_id, is_revealed=False)
            self._apply(bet, selection)
            self._session.add(bet)
            try:
                with self._guard("storing bet", **context):
                    self._session.flush()
                return bet
            except IntegrityError:
                self._session.rollback()
                LOGGER.info("Concurrent bet insert detected, updating existing bet instead")
                bet = self.get_for_user(user_id, edition_id)
                if bet is None:
                    raise
        self._apply(bet, selection)
        with self._guard("storing bet", **context):
            self._session.flush()
        self._session.expire(bet, ["employee_1", "employee_2", "employee_3", "chiringuito"])
        return bet

    def reveal_all(self, edition_id: int) -> int:
        """Flag every hidden bet of the edition as revealed; returns how many changed."""

        with self._guard("revealing bets", edition_id=edition_id):
            hidden = list(
                self._session.execute(
                    select(Bet).where(Bet.game_edition_id == edition_id, Bet.is_revealed.is_(False))
                ).scalars()
            )
            for bet in hidden:
                bet.is_revealed = True
            self._session.flush()
        return len(hidden)

    def list_bet_entries(self, edition_id: int) -> list[BetEntry]:
        """Bets joined with the payment state of their participant."""

        with self._guard("reading bets", edition_id=edition_id):
            rows = self._session.execute(
                select(
                    Bet.user_id,
                    Bet.employee_1_id,
                    Bet.employee_2_id,
                    Bet.employee_3_id,
                    Bet.chiringuito_employee_id,
                    EditionParticipant.payment_status,
                )
                .outerjoin(
                    EditionParticipant,
                    and_(
                        EditionParticipant.user_id == Bet.user_id,
                        EditionParticipant.game_edition_id == Bet.game_edition_id,
                    ),
                )
                .where(Bet.game_edition_id == edition_id)
                .order_by(Bet.user_id)
            ).all()
        return [
            BetEntry(
                user_id=row.user_id,
                employee_ids=(row.employee_1_id, row.employee_2_id, row.employee_3_id),
                bonus_employee_id=row.chiringuito_employee_id,
                payment_confirmed=bool(row.payment_status),
            )
            for row in rows
        ]
