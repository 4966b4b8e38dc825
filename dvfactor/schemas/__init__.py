"""Pydantic schemas exchanged by the HTTP API."""

from .bets import BetRead, BetSubmit, RevealRead
from .editions import (
    EditionCreate,
    EditionRead,
    EditionStatusUpdate,
    ParticipantRead,
    PaymentUpdateRead,
    PoolRead,
)
from .employees import EmployeeBrief, EmployeeCreate, EmployeeRead, ResignationCreate
from .payouts import PayoutReportRead, PayoutTableRowRead
from .profiles import ProfileRead, ProfileUpdate

__all__ = [
    "BetRead",
    "BetSubmit",
    "EditionCreate",
    "EditionRead",
    "EditionStatusUpdate",
    "EmployeeBrief",
    "EmployeeCreate",
    "EmployeeRead",
    "ParticipantRead",
    "PaymentUpdateRead",
    "PayoutReportRead",
    "PayoutTableRowRead",
    "PoolRead",
    "ProfileRead",
    "ProfileUpdate",
    "ResignationCreate",
    "RevealRead",
]
