"""Employee roster management."""
from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy.orm import Session

from dvfactor.core.errors import InvalidTransitionError, NotFoundError
from dvfactor.core.log import get_logger, log_context
from dvfactor.models import Employee
from dvfactor.repositories import EmployeeRepository

LOGGER = get_logger(__name__)


class EmployeeService:
    """Create employees and record their (single) resignation."""

    def __init__(self, session: Session, employees: EmployeeRepository | None = None) -> None:
        self._employees = employees or EmployeeRepository(session)

    def list_employees(self, *, active_only: bool = False) -> list[Employee]:
        return self._employees.list_employees(active_only=active_only)

    def add_employee(
        self,
        *,
        first_name: str,
        last_name: str,
        employee_code: str | None = None,
        hire_date: date | None = None,
    ) -> Employee:
        employee = Employee(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            employee_code=(employee_code or "").strip() or None,
            hire_date=hire_date,
            is_active=True,
        )
        self._employees.add(employee)
        self._employees.commit()
        LOGGER.info("Employee %s added", employee.id)
        return employee

    def record_resignation(
        self,
        employee_id: int,
        resignation_date: date,
        *,
        now: datetime | None = None,
    ) -> Employee:
        """Mark ``employee_id`` as resigned; the month is taken from the date."""

        employee = self._employees.get(employee_id)
        if employee is None:
            raise NotFoundError("Employee not found", employee_id=employee_id)
        with log_context.scope(employee_id=employee_id):
            if not employee.is_active or employee.resignation_date is not None:
                raise InvalidTransitionError(
                    "Employee has already resigned",
                    employee_id=employee_id,
                    resignation_date=employee.resignation_date,
                )
            employee.is_active = False
            employee.resignation_date = resignation_date
            employee.resignation_month = resignation_date.month
            employee.resignation_notified_at = now or datetime.now(timezone.utc)
            self._employees.save(employee)
            self._employees.commit(employee_id=employee_id)
            LOGGER.info("Resignation recorded on %s", resignation_date.isoformat())
            return employee
