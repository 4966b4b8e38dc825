"""Data access for the payout percentage table."""
from __future__ import annotations

from typing import Iterable

from sqlalchemy import delete, select

from dvfactor.domain.payouts import PayoutTableRow
from dvfactor.models import PayoutTableEntry

from .base import BaseRepository


class PayoutTableRepository(BaseRepository):
    """Read-only access for the engine, bulk replacement for loaders."""

    def list_rows(self) -> list[PayoutTableRow]:
        with self._guard("reading payout table"):
            entries = self._session.execute(
                select(PayoutTableEntry).order_by(PayoutTableEntry.month, PayoutTableEntry.bettors_count)
            ).scalars()
            return [
                PayoutTableRow(
                    month=entry.month,
                    bettors_count=entry.bettors_count,
                    percentage=self._to_decimal(entry.percentage),
                )
                for entry in entries
            ]

    def replace_rows(self, rows: Iterable[PayoutTableRow]) -> int:
        count = 0
        with self._guard("replacing payout table"):
            self._session.execute(delete(PayoutTableEntry))
            for row in rows:
                self._session.add(
                    PayoutTableEntry(
                        month=row.month,
                        bettors_count=row.bettors_count,
                        percentage=row.percentage,
                    )
                )
                count += 1
            self._session.flush()
        return count
