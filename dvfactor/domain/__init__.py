"""Pure game rules: money, bets, edition lifecycle and payouts."""

from .bets import BetSelection, validate_selection
from .editions import EditionStatus, ensure_accepting_bets, ensure_transition
from .payouts import (
    BetEntry,
    EditionPayoutReport,
    EditionSnapshot,
    ParticipantEntry,
    PayoutPercentageTable,
    PayoutTableRow,
    ResignationEntry,
    compute_edition_payouts,
    compute_total_pool,
    distribute_resignation,
)

__all__ = [
    "BetEntry",
    "BetSelection",
    "EditionPayoutReport",
    "EditionSnapshot",
    "EditionStatus",
    "ParticipantEntry",
    "PayoutPercentageTable",
    "PayoutTableRow",
    "ResignationEntry",
    "compute_edition_payouts",
    "compute_total_pool",
    "distribute_resignation",
    "ensure_accepting_bets",
    "ensure_transition",
    "validate_selection",
]
