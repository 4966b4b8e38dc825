"""Loads ledger snapshots and runs the payout engine on them."""
from __future__ import annotations

from sqlalchemy.orm import Session

from dvfactor.core.config import GameSettings, get_settings
from dvfactor.core.errors import NotFoundError, PayoutTableError
from dvfactor.core.log import get_logger, log_context, timeit
from dvfactor.domain.payouts import (
    EditionPayoutReport,
    EditionSnapshot,
    PayoutPercentageTable,
    compute_edition_payouts,
)
from dvfactor.repositories import (
    BetRepository,
    EditionRepository,
    EmployeeRepository,
    PayoutTableRepository,
)

LOGGER = get_logger(__name__)


class PayoutService:
    """Read-side facade over the payout engine."""

    def __init__(
        self,
        session: Session,
        *,
        editions: EditionRepository | None = None,
        employees: EmployeeRepository | None = None,
        bets: BetRepository | None = None,
        payout_table: PayoutTableRepository | None = None,
        game_settings: GameSettings | None = None,
    ) -> None:
        self._session = session
        self._editions = editions or EditionRepository(session)
        self._employees = employees or EmployeeRepository(session)
        self._bets = bets or BetRepository(session)
        self._payout_table = payout_table or PayoutTableRepository(session)
        self._game = game_settings or get_settings().game

    def payout_table(self) -> PayoutPercentageTable:
        table = PayoutPercentageTable(self._payout_table.list_rows())
        if not len(table):
            raise PayoutTableError("Payout table is empty")
        return table

    def payout_report(self, edition_id: int) -> EditionPayoutReport:
        """Settle ``edition_id`` against the current resignations."""

        edition = self._editions.get(edition_id)
        if edition is None:
            raise NotFoundError("Edition not found", edition_id=edition_id)

        with log_context.scope(edition_id=edition_id), timeit(
            "Payout report", logger=LOGGER, unit="bets", session=self._session
        ) as timer:
            snapshot = EditionSnapshot(
                edition_id=edition_id,
                total_pool=edition.total_pool,
                bets=self._bets.list_bet_entries(edition_id),
                resignations=self._employees.list_resignations(),
                start_date=edition.start_date,
                end_date=edition.end_date,
            )
            timer.set_total(len(snapshot.bets))
            try:
                report = compute_edition_payouts(
                    snapshot,
                    self.payout_table(),
                    rank_shares=self._game.rank_shares,
                    bonus_share=self._game.bonus_share,
                )
            except PayoutTableError as exc:
                exc.context.setdefault("edition_id", edition_id)
                LOGGER.error("Payout table cannot settle edition: %s", exc)
                raise
        LOGGER.debug(
            "Distributed %s of %s, unallocated %s",
            report.distributed,
            report.total_pool,
            report.unallocated,
        )
        return report
