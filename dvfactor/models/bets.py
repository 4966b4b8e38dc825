"""Bets placed by participants."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import Base, _ID_TYPE
from .employees import Employee


class Bet(Base):
    """One user's wager for one edition."""

    __tablename__ = "bets"
    __table_args__ = (
        UniqueConstraint("user_id", "game_edition_id", name="uq_bet_user_edition"),
        CheckConstraint(
            "employee_1_id <> employee_2_id AND employee_1_id <> employee_3_id "
            "AND employee_2_id <> employee_3_id",
            name="ck_bet_distinct_employees",
        ),
        CheckConstraint(
            "chiringuito_employee_id IS NULL OR chiringuito_employee_id IN "
            "(employee_1_id, employee_2_id, employee_3_id)",
            name="ck_bet_bonus_selected",
        ),
    )

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    game_edition_id: Mapped[int] = mapped_column(ForeignKey("game_editions.id"), nullable=False, index=True)
    employee_1_id: Mapped[int] = mapped_column(ForeignKey("employees.id"), nullable=False)
    employee_2_id: Mapped[int] = mapped_column(ForeignKey("employees.id"), nullable=False)
    employee_3_id: Mapped[int] = mapped_column(ForeignKey("employees.id"), nullable=False)
    chiringuito_employee_id: Mapped[int | None] = mapped_column(ForeignKey("employees.id"))
    is_revealed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.current_timestamp()
    )

    employee_1: Mapped[Employee] = relationship(foreign_keys=[employee_1_id])
    employee_2: Mapped[Employee] = relationship(foreign_keys=[employee_2_id])
    employee_3: Mapped[Employee] = relationship(foreign_keys=[employee_3_id])
    chiringuito: Mapped[Employee | None] = relationship(foreign_keys=[chiringuito_employee_id])

    @property
    def employee_ids(self) -> tuple[int, int, int]:
        return (self.employee_1_id, self.employee_2_id, self.employee_3_id)
