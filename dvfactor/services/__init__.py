"""Service layer entrypoints for the game rules."""

from .bet_service import BetService
from .edition_service import EditionService
from .employee_service import EmployeeService
from .participation_service import ParticipationService
from .payout_service import PayoutService
from .pool_service import PaymentService, PaymentUpdate, PoolService
from .profile_service import ProfileService

__all__ = [
    "BetService",
    "EditionService",
    "EmployeeService",
    "ParticipationService",
    "PaymentService",
    "PaymentUpdate",
    "PayoutService",
    "PoolService",
    "ProfileService",
]
