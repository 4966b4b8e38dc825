"""Static payout percentage reference data."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import CheckConstraint, Numeric, SmallInteger
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class PayoutTableEntry(Base):
    """Percentage of the pool for a (resignation month, selector count) pair."""

    __tablename__ = "payout_table"
    __table_args__ = (
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_payout_month"),
        CheckConstraint("bettors_count >= 1", name="ck_payout_bettors"),
        CheckConstraint("percentage BETWEEN 0 AND 100", name="ck_payout_percentage"),
    )

    month: Mapped[int] = mapped_column(SmallInteger, primary_key=True, autoincrement=False)
    bettors_count: Mapped[int] = mapped_column(SmallInteger, primary_key=True, autoincrement=False)
    percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2, asdecimal=True), nullable=False)
