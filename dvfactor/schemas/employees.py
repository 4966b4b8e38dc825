"""Schemas for the employee roster."""
from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class EmployeeCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=80)
    last_name: str = Field(min_length=1, max_length=80)
    employee_code: str | None = Field(default=None, max_length=32)
    hire_date: date | None = None


class ResignationCreate(BaseModel):
    resignation_date: date


class EmployeeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    employee_code: str | None = None
    hire_date: date | None = None
    is_active: bool
    resignation_date: date | None = None
    resignation_month: int | None = None


class EmployeeBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
