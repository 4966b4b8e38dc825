"""Edition lifecycle: open -> closed -> finished."""
from __future__ import annotations

from enum import Enum

from dvfactor.core.errors import EditionClosedError, InvalidTransitionError


class EditionStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    FINISHED = "finished"


_TRANSITIONS: dict[EditionStatus, frozenset[EditionStatus]] = {
    EditionStatus.OPEN: frozenset({EditionStatus.CLOSED}),
    EditionStatus.CLOSED: frozenset({EditionStatus.FINISHED}),
    EditionStatus.FINISHED: frozenset(),
}


def ensure_transition(
    current: EditionStatus | str,
    target: EditionStatus | str,
    *,
    edition_id: int | None = None,
) -> EditionStatus:
    """Validate an administrator-driven status change and return the target."""

    current_status = EditionStatus(current)
    target_status = EditionStatus(target)
    if target_status not in _TRANSITIONS[current_status]:
        raise InvalidTransitionError(
            f"Cannot move edition from {current_status.value} to {target_status.value}",
            edition_id=edition_id,
        )
    return target_status


def ensure_open(
    status: EditionStatus | str,
    *,
    action: str = "accepting bets",
    edition_id: int | None = None,
) -> None:
    if EditionStatus(status) is not EditionStatus.OPEN:
        raise EditionClosedError(
            f"Edition is not {action}",
            edition_id=edition_id,
            status=EditionStatus(status).value,
        )


def ensure_accepting_bets(status: EditionStatus | str, *, edition_id: int | None = None) -> None:
    ensure_open(status, action="accepting bets", edition_id=edition_id)
