"""Schemas for the payout table and settlement reports."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, field_serializer

from dvfactor.core.formatting import format_money, format_percentage
from dvfactor.domain.payouts import EditionPayoutReport, PayoutTableRow


class PayoutTableRowRead(BaseModel):
    month: int
    bettors_count: int
    percentage: Decimal

    @field_serializer("percentage")
    def _serialize_percentage(self, value: Decimal) -> str:
        return format_percentage(value)

    @classmethod
    def from_row(cls, row: PayoutTableRow) -> "PayoutTableRowRead":
        return cls(month=row.month, bettors_count=row.bettors_count, percentage=row.percentage)


class BettorShareRead(BaseModel):
    user_id: str
    amount: Decimal
    bonus: bool

    @field_serializer("amount")
    def _serialize_money(self, value: Decimal) -> str:
        return format_money(value)


class ResignationPayoutRead(BaseModel):
    employee_id: int
    resignation_date: date
    rank: int
    month: int
    rank_share: Decimal
    selector_count: int
    percentage: Decimal | None = None
    attributable: Decimal
    shares: list[BettorShareRead]

    @field_serializer("attributable")
    def _serialize_money(self, value: Decimal) -> str:
        return format_money(value)

    @field_serializer("rank_share", "percentage")
    def _serialize_percentage(self, value: Decimal | None) -> str | None:
        return format_percentage(value)


class PayoutReportRead(BaseModel):
    """Settlement of an edition as exposed by the API."""

    edition_id: int
    total_pool: Decimal
    distributed: Decimal
    unallocated: Decimal
    events: list[ResignationPayoutRead]
    totals: dict[str, Decimal]

    @field_serializer("total_pool", "distributed", "unallocated")
    def _serialize_money(self, value: Decimal) -> str:
        return format_money(value)

    @field_serializer("totals")
    def _serialize_totals(self, value: dict[str, Decimal]) -> dict[str, str]:
        return {user_id: format_money(amount) for user_id, amount in value.items()}

    @classmethod
    def from_report(cls, report: EditionPayoutReport) -> "PayoutReportRead":
        return cls(
            edition_id=report.edition_id,
            total_pool=report.total_pool,
            distributed=report.distributed,
            unallocated=report.unallocated,
            events=[
                ResignationPayoutRead(
                    employee_id=event.employee_id,
                    resignation_date=event.resignation_date,
                    rank=event.rank,
                    month=event.month,
                    rank_share=event.rank_share,
                    selector_count=event.selector_count,
                    percentage=event.percentage,
                    attributable=event.attributable,
                    shares=[
                        BettorShareRead(user_id=share.user_id, amount=share.amount, bonus=share.bonus)
                        for share in event.shares
                    ],
                )
                for event in report.events
            ],
            totals=dict(report.totals),
        )
