"""Fixed-point currency helpers."""
from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_EVEN, Decimal
from typing import Sequence

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def to_money(value: object) -> Decimal:
    """Coerce ``value`` to a two-digit ``Decimal``.

    Floats are refused so that binary rounding never leaks into the ledger.
    """

    if isinstance(value, float):
        raise TypeError("Currency amounts must not be binary floats; pass a Decimal or str.")
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        amount = Decimal(str(value))
    return quantize_money(amount)


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents for storage."""

    return value.quantize(CENT, rounding=ROUND_HALF_EVEN)


def truncate_money(value: Decimal) -> Decimal:
    """Round towards zero to cents, so shares never exceed their source amount."""

    return value.quantize(CENT, rounding=ROUND_DOWN)


def percent_of(amount: Decimal, percentage: Decimal) -> Decimal:
    """Exact ``percentage`` % of ``amount`` (not rounded)."""

    return amount * percentage / HUNDRED


def split_evenly(amount: Decimal, keys: Sequence[str]) -> dict[str, Decimal]:
    """Split ``amount`` evenly over ``keys`` at cent precision.

    Every key gets the truncated even share; leftover cents go one by one to
    the keys in ascending lexicographic order. The shares always add up to
    ``amount``.
    """

    if not keys:
        return {}
    ordered = sorted(set(keys))
    amount = truncate_money(amount)
    base = truncate_money(amount / len(ordered))
    leftover_cents = int((amount - base * len(ordered)) / CENT)
    shares = {key: base for key in ordered}
    for key in ordered[:leftover_cents]:
        shares[key] += CENT
    return shares


__all__ = [
    "CENT",
    "HUNDRED",
    "ZERO",
    "percent_of",
    "quantize_money",
    "split_evenly",
    "to_money",
    "truncate_money",
]
