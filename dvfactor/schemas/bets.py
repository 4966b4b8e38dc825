"""Schemas for bets."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .employees import EmployeeBrief


class BetSubmit(BaseModel):
    """Three employees plus an optional Chiringuito bonus.

    Distinctness and bonus membership are checked by the bet rules so the
    error carries the offending ids.
    """

    employee_ids: list[int] = Field(min_length=3, max_length=3)
    chiringuito_employee_id: int | None = None


class BetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    game_edition_id: int
    employee_1: EmployeeBrief
    employee_2: EmployeeBrief
    employee_3: EmployeeBrief
    chiringuito: EmployeeBrief | None = None
    is_revealed: bool


class RevealRead(BaseModel):
    edition_id: int
    revealed: int
