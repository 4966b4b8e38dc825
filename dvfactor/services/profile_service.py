"""Player profiles: display details and the administrator roster."""
from __future__ import annotations

import re

from sqlalchemy.orm import Session

from dvfactor.core.errors import DuplicateRecordError, ProfileValidationError
from dvfactor.core.log import get_logger, log_context
from dvfactor.models import Profile
from dvfactor.repositories import ProfileRepository

LOGGER = get_logger(__name__)

NICKNAME_MIN_LENGTH = 3
NICKNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


def validate_nickname(nickname: str) -> str:
    """Return the stripped nickname or raise ``ProfileValidationError``."""

    value = (nickname or "").strip()
    if len(value) < NICKNAME_MIN_LENGTH:
        raise ProfileValidationError(
            f"Nickname must be at least {NICKNAME_MIN_LENGTH} characters long", nickname=value
        )
    if not NICKNAME_PATTERN.match(value):
        raise ProfileValidationError(
            "Nickname may only contain letters, numbers, hyphens and underscores", nickname=value
        )
    return value


class ProfileService:
    """Read and edit the profile of the calling user."""

    def __init__(self, session: Session, profiles: ProfileRepository | None = None) -> None:
        self._profiles = profiles or ProfileRepository(session)

    def get_profile(self, user_id: str, *, email: str | None = None) -> Profile:
        """Return the caller's profile, creating a bare one on the first visit."""

        profile = self._profiles.ensure(user_id, email=email)
        self._profiles.commit(user_id=user_id)
        return profile

    def list_profiles(self) -> list[Profile]:
        return self._profiles.list_profiles()

    def update_profile(self, user_id: str, nickname: str, full_name: str | None) -> Profile:
        """Set nickname and full name; nicknames are unique across users."""

        value = validate_nickname(nickname)
        with log_context.scope(user_id=user_id):
            profile = self._profiles.ensure(user_id)
            if value != profile.nickname:
                owner = self._profiles.get_by_nickname(value)
                if owner is not None and owner.id != user_id:
                    raise DuplicateRecordError("Nickname already in use", user_id=user_id, nickname=value)
            self._profiles.update_details(
                profile,
                nickname=value,
                full_name=(full_name or "").strip() or None,
            )
            self._profiles.commit(user_id=user_id)
            LOGGER.info("Profile updated, nickname %s", value)
            return profile
