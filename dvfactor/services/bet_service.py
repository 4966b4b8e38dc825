"""Bet submission and visibility."""
from __future__ import annotations

from typing import Sequence

from sqlalchemy.orm import Session

from dvfactor.core.errors import BetValidationError, NotFoundError, PaymentRequiredError
from dvfactor.core.log import get_logger, log_context
from dvfactor.domain.bets import validate_selection
from dvfactor.domain.editions import ensure_accepting_bets
from dvfactor.models import Bet
from dvfactor.repositories import (
    BetRepository,
    EditionRepository,
    EmployeeRepository,
    ParticipantRepository,
)

LOGGER = get_logger(__name__)


class BetService:
    """Place, read and reveal bets for an edition."""

    def __init__(
        self,
        session: Session,
        *,
        editions: EditionRepository | None = None,
        participants: ParticipantRepository | None = None,
        employees: EmployeeRepository | None = None,
        bets: BetRepository | None = None,
    ) -> None:
        self._editions = editions or EditionRepository(session)
        self._participants = participants or ParticipantRepository(session)
        self._employees = employees or EmployeeRepository(session)
        self._bets = bets or BetRepository(session)

    def submit_bet(
        self,
        user_id: str,
        edition_id: int,
        employee_ids: Sequence[int],
        bonus_employee_id: int | None = None,
    ) -> Bet:
        """Validate and store the bet of ``user_id``, replacing any earlier one."""

        with log_context.scope(edition_id=edition_id, user_id=user_id):
            edition = self._editions.get(edition_id)
            if edition is None:
                raise NotFoundError("Edition not found", edition_id=edition_id)
            ensure_accepting_bets(edition.status, edition_id=edition_id)

            participant = self._participants.get_for_user(user_id, edition_id)
            if participant is None or not participant.payment_status:
                raise PaymentRequiredError(
                    "Payment must be confirmed before betting",
                    user_id=user_id,
                    edition_id=edition_id,
                )

            selection = validate_selection(
                employee_ids,
                bonus_employee_id,
                user_id=user_id,
                edition_id=edition_id,
            )
            active = self._employees.find_active_ids(selection.employee_ids)
            unavailable = [employee_id for employee_id in selection.employee_ids if employee_id not in active]
            if unavailable:
                raise BetValidationError(
                    "Selected employees must exist and still be active",
                    user_id=user_id,
                    edition_id=edition_id,
                    employee_ids=unavailable,
                )

            bet = self._bets.upsert(user_id, edition_id, selection)
            self._participants.mark_has_bet(participant)
            self._bets.commit(user_id=user_id, edition_id=edition_id)
            LOGGER.info(
                "Bet stored on employees %s (bonus: %s)",
                list(selection.employee_ids),
                selection.bonus_employee_id,
            )
            return bet

    def get_bet(self, user_id: str, edition_id: int) -> Bet | None:
        return self._bets.get_for_user(user_id, edition_id)

    def list_bets(self, edition_id: int, *, viewer_id: str, is_admin: bool = False) -> list[Bet]:
        """Bets ``viewer_id`` may see: all for admins, otherwise revealed ones and their own."""

        if self._editions.get(edition_id) is None:
            raise NotFoundError("Edition not found", edition_id=edition_id)
        return self._bets.list_for_edition(edition_id, visible_to=None if is_admin else viewer_id)

    def reveal_bets(self, edition_id: int) -> int:
        if self._editions.get(edition_id) is None:
            raise NotFoundError("Edition not found", edition_id=edition_id)
        with log_context.scope(edition_id=edition_id):
            revealed = self._bets.reveal_all(edition_id)
            self._bets.commit(edition_id=edition_id)
            LOGGER.info("Revealed %s bets", revealed)
            return revealed
