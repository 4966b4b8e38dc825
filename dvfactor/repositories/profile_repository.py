"""Data access for user profiles."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from dvfactor.core.errors import DuplicateRecordError
from dvfactor.models import Profile

from .base import BaseRepository


class ProfileRepository(BaseRepository):
    """Mirror of identity provider users, keyed by their subject id."""

    def get(self, user_id: str) -> Profile | None:
        with self._guard("loading profile", user_id=user_id):
            return self._session.get(Profile, user_id)

    def get_by_nickname(self, nickname: str) -> Profile | None:
        with self._guard("loading profile", nickname=nickname):
            return self._session.execute(
                select(Profile).where(Profile.nickname == nickname)
            ).scalar_one_or_none()

    def list_profiles(self) -> list[Profile]:
        """Every profile, newest first."""

        with self._guard("listing profiles"):
            return list(
                self._session.execute(
                    select(Profile).order_by(Profile.created_at.desc(), Profile.id)
                ).scalars()
            )

    def ensure(self, user_id: str, email: str | None = None) -> Profile:
        """Return the profile of ``user_id``, inserting a bare one when missing."""

        profile = self.get(user_id)
        if profile is not None:
            if email and profile.email is None:
                profile.email = email
            return profile
        profile = Profile(id=user_id, email=email, is_admin=False)
        self._session.add(profile)
        try:
            with self._guard("creating profile", user_id=user_id):
                self._session.flush()
        except IntegrityError:
            self._session.rollback()
            profile = self.get(user_id)
            if profile is None:
                raise
        return profile

    def update_details(self, profile: Profile, *, nickname: str, full_name: str | None) -> Profile:
        """Apply display details; the unique nickname index has the final say."""

        profile.nickname = nickname
        profile.full_name = full_name
        try:
            with self._guard("updating profile", user_id=profile.id):
                self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise DuplicateRecordError(
                "Nickname already in use", user_id=profile.id, nickname=nickname
            ) from exc
        return profile
