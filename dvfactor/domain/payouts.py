"""Prize pool and payout computation.

Everything in this module is pure: the functions receive plain snapshots of
the ledgers and return new immutable values, so the same snapshot always
produces the same distribution.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Sequence

from dvfactor.core.errors import PayoutTableError

from .money import HUNDRED, ZERO, percent_of, split_evenly, to_money, truncate_money

DEFAULT_RANK_SHARES: tuple[Decimal, ...] = (Decimal("70"), Decimal("25"), Decimal("5"))
DEFAULT_BONUS_SHARE = Decimal("60")


@dataclass(frozen=True, slots=True)
class ParticipantEntry:
    """Payment state of one participant."""

    user_id: str
    payment_amount: Decimal
    payment_confirmed: bool


@dataclass(frozen=True, slots=True)
class PayoutTableRow:
    month: int
    bettors_count: int
    percentage: Decimal


@dataclass(frozen=True, slots=True)
class BetEntry:
    """One bettor's selections, as seen by the engine."""

    user_id: str
    employee_ids: tuple[int, ...]
    bonus_employee_id: int | None = None
    payment_confirmed: bool = True

    def selects(self, employee_id: int) -> bool:
        return employee_id in self.employee_ids

    def has_bonus_on(self, employee_id: int) -> bool:
        return self.bonus_employee_id == employee_id


@dataclass(frozen=True, slots=True)
class ResignationEntry:
    employee_id: int
    resignation_date: date


@dataclass(frozen=True, slots=True)
class EditionSnapshot:
    """Everything the engine needs to settle one edition."""

    edition_id: int
    total_pool: Decimal
    bets: Sequence[BetEntry]
    resignations: Sequence[ResignationEntry]
    start_date: date | None = None
    end_date: date | None = None


@dataclass(frozen=True, slots=True)
class BettorShare:
    user_id: str
    amount: Decimal
    bonus: bool = False


@dataclass(frozen=True, slots=True)
class ResignationPayout:
    """Distribution of one ranked resignation."""

    employee_id: int
    resignation_date: date
    rank: int
    month: int
    rank_share: Decimal
    selector_count: int
    percentage: Decimal | None
    attributable: Decimal
    shares: tuple[BettorShare, ...] = ()

    @property
    def distributed(self) -> Decimal:
        return sum((share.amount for share in self.shares), ZERO)


@dataclass(frozen=True, slots=True)
class EditionPayoutReport:
    """Settlement of an edition: ranked events plus per-user totals."""

    edition_id: int
    total_pool: Decimal
    events: tuple[ResignationPayout, ...]
    totals: Mapping[str, Decimal] = field(default_factory=dict)

    @property
    def distributed(self) -> Decimal:
        return sum((event.distributed for event in self.events), ZERO)

    @property
    def unallocated(self) -> Decimal:
        """Part of the pool no bettor receives; candidate for a later jackpot."""

        return self.total_pool - self.distributed


def compute_total_pool(jackpot: Decimal, participants: Iterable[ParticipantEntry]) -> Decimal:
    """Return ``jackpot`` plus every confirmed payment."""

    total = to_money(jackpot)
    for participant in participants:
        if participant.payment_confirmed:
            total += to_money(participant.payment_amount)
    return total


class PayoutPercentageTable:
    """Lookup of payout percentages by resignation month and selector count.

    When the selector count is larger than the largest count modeled for the
    month, the row with the largest count is used. A gap below that maximum is
    a configuration error.
    """

    def __init__(self, rows: Iterable[PayoutTableRow]) -> None:
        entries: dict[tuple[int, int], Decimal] = {}
        max_counts: dict[int, int] = {}
        for row in rows:
            self._validate_row(row)
            key = (row.month, row.bettors_count)
            if key in entries:
                raise PayoutTableError(
                    "Duplicate payout table row",
                    month=row.month,
                    bettors_count=row.bettors_count,
                )
            entries[key] = Decimal(row.percentage)
            max_counts[row.month] = max(max_counts.get(row.month, 0), row.bettors_count)
        self._entries = entries
        self._max_counts = max_counts

    @staticmethod
    def _validate_row(row: PayoutTableRow) -> None:
        if not 1 <= row.month <= 12:
            raise PayoutTableError("Payout table month out of range", month=row.month)
        if row.bettors_count < 1:
            raise PayoutTableError(
                "Payout table rows need at least one bettor",
                month=row.month,
                bettors_count=row.bettors_count,
            )
        percentage = Decimal(row.percentage)
        if percentage < 0 or percentage > HUNDRED:
            raise PayoutTableError(
                "Payout percentage out of range",
                month=row.month,
                bettors_count=row.bettors_count,
                percentage=percentage,
            )

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def rows(self) -> list[PayoutTableRow]:
        return [
            PayoutTableRow(month=month, bettors_count=count, percentage=percentage)
            for (month, count), percentage in sorted(self._entries.items())
        ]

    def max_count(self, month: int) -> int | None:
        return self._max_counts.get(month)

    def resolve(self, month: int, selector_count: int) -> Decimal:
        """Return the percentage of the pool for ``(month, selector_count)``."""

        if selector_count < 1:
            raise ValueError("A payout needs at least one selector.")
        max_count = self._max_counts.get(month)
        if max_count is None:
            raise PayoutTableError(
                "No payout table rows for month",
                month=month,
                selector_count=selector_count,
            )
        count = min(selector_count, max_count)
        try:
            return self._entries[(month, count)]
        except KeyError:
            raise PayoutTableError(
                "Missing payout table row",
                month=month,
                selector_count=selector_count,
            ) from None


def attributable_amount(total_pool: Decimal, percentage: Decimal, rank_share: Decimal) -> Decimal:
    """Pool x percentage x rank share, truncated to cents."""

    return truncate_money(percent_of(percent_of(total_pool, percentage), rank_share))


def distribute_resignation(
    attributable: Decimal,
    selectors: Iterable[str],
    bonus_selectors: Iterable[str] = (),
    *,
    bonus_share: Decimal = DEFAULT_BONUS_SHARE,
) -> tuple[BettorShare, ...]:
    """Split ``attributable`` over the bettors that picked the employee.

    Bonus selectors share ``bonus_share`` % of the amount and the others
    share the rest. If everybody holds the bonus the bonus group takes the
    whole amount; without any bonus the amount is split evenly.
    """

    selector_set = set(selectors)
    bonus_set = set(bonus_selectors) & selector_set
    regular_set = selector_set - bonus_set
    if not selector_set:
        return ()

    if bonus_set and regular_set:
        bonus_amount = truncate_money(percent_of(attributable, bonus_share))
        regular_amount = attributable - bonus_amount
    elif bonus_set:
        bonus_amount, regular_amount = attributable, ZERO
    else:
        bonus_amount, regular_amount = ZERO, attributable

    shares = [
        BettorShare(user_id=user_id, amount=amount, bonus=True)
        for user_id, amount in split_evenly(bonus_amount, list(bonus_set)).items()
    ]
    shares.extend(
        BettorShare(user_id=user_id, amount=amount)
        for user_id, amount in split_evenly(regular_amount, list(regular_set)).items()
    )
    shares.sort(key=lambda share: share.user_id)
    return tuple(shares)


def rank_resignations(
    resignations: Iterable[ResignationEntry],
    *,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[ResignationEntry]:
    """Resignations inside the edition window, earliest first."""

    qualifying = [
        entry
        for entry in resignations
        if (start_date is None or entry.resignation_date >= start_date)
        and (end_date is None or entry.resignation_date <= end_date)
    ]
    return sorted(qualifying, key=lambda entry: (entry.resignation_date, entry.employee_id))


def compute_edition_payouts(
    snapshot: EditionSnapshot,
    table: PayoutPercentageTable,
    *,
    rank_shares: Sequence[Decimal] = DEFAULT_RANK_SHARES,
    bonus_share: Decimal = DEFAULT_BONUS_SHARE,
) -> EditionPayoutReport:
    """Settle every ranked resignation of an edition."""

    counted_bets = [bet for bet in snapshot.bets if bet.payment_confirmed]
    ranked = rank_resignations(
        snapshot.resignations,
        start_date=snapshot.start_date,
        end_date=snapshot.end_date,
    )

    events: list[ResignationPayout] = []
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for rank, (entry, rank_share) in enumerate(zip(ranked, rank_shares), start=1):
        selectors = sorted({bet.user_id for bet in counted_bets if bet.selects(entry.employee_id)})
        bonus_selectors = {
            bet.user_id for bet in counted_bets if bet.has_bonus_on(entry.employee_id)
        }
        month = entry.resignation_date.month

        if not selectors:
            events.append(
                ResignationPayout(
                    employee_id=entry.employee_id,
                    resignation_date=entry.resignation_date,
                    rank=rank,
                    month=month,
                    rank_share=rank_share,
                    selector_count=0,
                    percentage=None,
                    attributable=ZERO,
                )
            )
            continue

        percentage = table.resolve(month, len(selectors))
        attributable = attributable_amount(snapshot.total_pool, percentage, rank_share)
        shares = distribute_resignation(
            attributable,
            selectors,
            bonus_selectors,
            bonus_share=bonus_share,
        )
        for share in shares:
            totals[share.user_id] += share.amount
        events.append(
            ResignationPayout(
                employee_id=entry.employee_id,
                resignation_date=entry.resignation_date,
                rank=rank,
                month=month,
                rank_share=rank_share,
                selector_count=len(selectors),
                percentage=percentage,
                attributable=attributable,
                shares=shares,
            )
        )

    return EditionPayoutReport(
        edition_id=snapshot.edition_id,
        total_pool=to_money(snapshot.total_pool),
        events=tuple(events),
        totals=dict(sorted(totals.items())),
    )


__all__ = [
    "BetEntry",
    "BettorShare",
    "DEFAULT_BONUS_SHARE",
    "DEFAULT_RANK_SHARES",
    "EditionPayoutReport",
    "EditionSnapshot",
    "ParticipantEntry",
    "PayoutPercentageTable",
    "PayoutTableRow",
    "ResignationEntry",
    "ResignationPayout",
    "attributable_amount",
    "compute_edition_payouts",
    "compute_total_pool",
    "distribute_resignation",
    "rank_resignations",
]
