"""Schemas for player profiles."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdate(BaseModel):
    """Nickname rules are enforced by the profile service."""

    nickname: str = Field(max_length=80)
    full_name: str | None = Field(default=None, max_length=160)


class ProfileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None = None
    nickname: str | None = None
    full_name: str | None = None
    is_admin: bool
    created_at: datetime | None = None
