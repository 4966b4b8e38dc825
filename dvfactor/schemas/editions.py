"""Schemas for editions, participants and payments."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from dvfactor.core.formatting import format_money
from dvfactor.domain.editions import EditionStatus


class EditionCreate(BaseModel):
    """Payload for opening a new edition."""

    year: int = Field(ge=2000, le=2100)
    entry_fee: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    jackpot: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    start_date: date
    end_date: date
    betting_deadline: date | None = None

    @model_validator(mode="after")
    def _check_dates(self) -> "EditionCreate":
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        if self.betting_deadline is not None and not (
            self.start_date <= self.betting_deadline <= self.end_date
        ):
            raise ValueError("betting_deadline must fall between start_date and end_date")
        return self


class EditionStatusUpdate(BaseModel):
    status: EditionStatus


class EditionRead(BaseModel):
    """An edition as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    year: int
    entry_fee: Decimal
    jackpot: Decimal
    start_date: date
    betting_deadline: date | None = None
    end_date: date
    status: EditionStatus
    total_pool: Decimal

    @field_serializer("entry_fee", "jackpot", "total_pool")
    def _serialize_money(self, value: Decimal) -> str:
        return format_money(value)


class PoolRead(BaseModel):
    edition_id: int
    total_pool: Decimal

    @field_serializer("total_pool")
    def _serialize_money(self, value: Decimal) -> str:
        return format_money(value)


class ParticipantRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    game_edition_id: int
    payment_amount: Decimal
    payment_status: bool
    payment_date: datetime | None = None
    has_bet: bool

    @field_serializer("payment_amount")
    def _serialize_money(self, value: Decimal) -> str:
        return format_money(value)


class PaymentUpdateRead(BaseModel):
    """Participant after a payment change, with the pool it produced."""

    participant: ParticipantRead
    total_pool: Decimal

    @field_serializer("total_pool")
    def _serialize_money(self, value: Decimal) -> str:
        return format_money(value)
