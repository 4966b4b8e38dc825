"""Helper functions for rendering amounts and percentages."""

from __future__ import annotations

from decimal import Decimal


def format_money(value: Decimal | int | float) -> str:
    """Render an amount with exactly two decimals, e.g. ``"12.50"``."""

    return f"{Decimal(str(value)):.2f}"


def format_percentage(value: Decimal | int | float | None) -> str | None:
    """Render a percentage with two decimals; ``None`` stays ``None``."""

    if value is None:
        return None
    return f"{Decimal(str(value)):.2f}"
