"""Game editions and their participants."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from dvfactor.domain.editions import EditionStatus

from .base import Base, _ID_TYPE, _MONEY_TYPE


class GameEdition(Base):
    """A yearly run of the game."""

    __tablename__ = "game_editions"

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    entry_fee: Mapped[Decimal] = mapped_column(_MONEY_TYPE, nullable=False)
    jackpot: Mapped[Decimal] = mapped_column(_MONEY_TYPE, nullable=False, default=Decimal("0.00"))
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    betting_deadline: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[EditionStatus] = mapped_column(
        SQLEnum(
            EditionStatus,
            native_enum=False,
            length=16,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=EditionStatus.OPEN,
    )
    total_pool: Mapped[Decimal] = mapped_column(_MONEY_TYPE, nullable=False, default=Decimal("0.00"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )

    participants: Mapped[list["EditionParticipant"]] = relationship(back_populates="edition")


class EditionParticipant(Base):
    """A user's enrollment in one edition."""

    __tablename__ = "edition_participants"
    __table_args__ = (
        UniqueConstraint("user_id", "game_edition_id", name="uq_participant_user_edition"),
    )

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    game_edition_id: Mapped[int] = mapped_column(ForeignKey("game_editions.id"), nullable=False, index=True)
    payment_amount: Mapped[Decimal] = mapped_column(_MONEY_TYPE, nullable=False)
    payment_status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    payment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    has_bet: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )

    edition: Mapped[GameEdition] = relationship(back_populates="participants")
