"""Database models for the DV-Factor game."""
from __future__ import annotations

from .base import Base
from .bets import Bet
from .editions import EditionParticipant, GameEdition
from .employees import Employee
from .payouts import PayoutTableEntry
from .profiles import Profile

__all__ = [
    "Base",
    "Bet",
    "EditionParticipant",
    "Employee",
    "GameEdition",
    "PayoutTableEntry",
    "Profile",
]
