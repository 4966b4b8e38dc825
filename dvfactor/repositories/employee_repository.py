"""Data access for the employee roster."""
from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from dvfactor.core.errors import DuplicateRecordError
from dvfactor.domain.payouts import ResignationEntry
from dvfactor.models import Employee

from .base import BaseRepository


class EmployeeRepository(BaseRepository):
    """Repository for employees and their resignations."""

    def get(self, employee_id: int) -> Employee | None:
        with self._guard("loading employee", employee_id=employee_id):
            return self._session.get(Employee, employee_id)

    def list_employees(self, *, active_only: bool = False) -> list[Employee]:
        statement = select(Employee).order_by(Employee.last_name, Employee.first_name, Employee.id)
        if active_only:
            statement = statement.where(Employee.is_active.is_(True))
        with self._guard("listing employees"):
            return list(self._session.execute(statement).scalars())

    def find_active_ids(self, employee_ids: Iterable[int]) -> set[int]:
        ids = list(employee_ids)
        with self._guard("checking employees"):
            rows = self._session.execute(
                select(Employee.id).where(Employee.id.in_(ids), Employee.is_active.is_(True))
            ).scalars()
            return set(rows)

    def add(self, employee: Employee) -> Employee:
        self._session.add(employee)
        try:
            with self._guard("creating employee"):
                self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise DuplicateRecordError(
                "Employee code already in use", employee_code=employee.employee_code
            ) from exc
        return employee

    def save(self, employee: Employee) -> Employee:
        with self._guard("updating employee", employee_id=employee.id):
            self._session.flush()
        return employee

    def list_resignations(self) -> list[ResignationEntry]:
        with self._guard("listing resignations"):
            rows = self._session.execute(
                select(Employee.id, Employee.resignation_date)
                .where(Employee.resignation_date.is_not(None))
                .order_by(Employee.resignation_date, Employee.id)
            ).all()
        return [ResignationEntry(employee_id=row.id, resignation_date=row.resignation_date) for row in rows]
