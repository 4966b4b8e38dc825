"""Employees that can be bet on."""
from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .base import Base, _ID_TYPE


class Employee(Base):
    """A colleague whose resignation can be predicted."""

    __tablename__ = "employees"
    __table_args__ = (
        CheckConstraint(
            "resignation_month IS NULL OR resignation_month BETWEEN 1 AND 12",
            name="ck_employee_resignation_month",
        ),
    )

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(80), nullable=False)
    last_name: Mapped[str] = mapped_column(String(80), nullable=False)
    employee_code: Mapped[str | None] = mapped_column(String(32), unique=True)
    hire_date: Mapped[date | None] = mapped_column(Date)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    resignation_date: Mapped[date | None] = mapped_column(Date)
    resignation_month: Mapped[int | None] = mapped_column(SmallInteger)
    resignation_notified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )

    @property
    def display_name(self) -> str:
        return f"{self.last_name} {self.first_name}"
