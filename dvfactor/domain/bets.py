"""Rules for a valid bet selection."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from dvfactor.core.errors import BetValidationError

SELECTION_SIZE = 3


@dataclass(frozen=True, slots=True)
class BetSelection:
    """Three distinct employees plus an optional Chiringuito bonus among them."""

    employee_ids: tuple[int, int, int]
    bonus_employee_id: int | None = None


def validate_selection(
    employee_ids: Sequence[int],
    bonus_employee_id: int | None = None,
    *,
    user_id: str | None = None,
    edition_id: int | None = None,
) -> BetSelection:
    """Return a normalized ``BetSelection`` or raise ``BetValidationError``."""

    selected = tuple(int(employee_id) for employee_id in employee_ids)
    if len(selected) != SELECTION_SIZE:
        raise BetValidationError(
            f"A bet needs exactly {SELECTION_SIZE} employees",
            user_id=user_id,
            edition_id=edition_id,
            employee_ids=list(selected),
        )
    if len(set(selected)) != SELECTION_SIZE:
        raise BetValidationError(
            "The same employee cannot be selected more than once",
            user_id=user_id,
            edition_id=edition_id,
            employee_ids=list(selected),
        )
    if bonus_employee_id is not None and int(bonus_employee_id) not in selected:
        raise BetValidationError(
            "The Chiringuito bonus must be placed on one of the selected employees",
            user_id=user_id,
            edition_id=edition_id,
            employee_id=bonus_employee_id,
        )
    bonus = None if bonus_employee_id is None else int(bonus_employee_id)
    return BetSelection(employee_ids=selected, bonus_employee_id=bonus)  # type: ignore[arg-type]
