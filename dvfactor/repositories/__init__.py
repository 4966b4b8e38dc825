"""Repositories wrapping the relational store."""

from .bet_repository import BetRepository
from .edition_repository import EditionRepository
from .employee_repository import EmployeeRepository
from .participant_repository import ParticipantRepository
from .payout_table_repository import PayoutTableRepository
from .profile_repository import ProfileRepository

__all__ = [
    "BetRepository",
    "EditionRepository",
    "EmployeeRepository",
    "ParticipantRepository",
    "PayoutTableRepository",
    "ProfileRepository",
]
