"""Tests for profile details and the user roster."""
from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from dvfactor.core.errors import DuplicateRecordError, ProfileValidationError
from dvfactor.models import Profile
from dvfactor.services import ProfileService


def test_first_visit_creates_a_bare_profile(session: Session) -> None:
    profile = ProfileService(session).get_profile("alice", email="alice@example.com")

    assert profile.email == "alice@example.com"
    assert profile.nickname is None
    assert profile.is_admin is False
    assert session.get(Profile, "alice") is not None


def test_update_profile_sets_nickname_and_full_name(session: Session) -> None:
    service = ProfileService(session)

    profile = service.update_profile("alice", " alice_99 ", "  Alice Liddell ")

    assert profile.nickname == "alice_99"
    assert profile.full_name == "Alice Liddell"
    assert service.update_profile("alice", "alice_99", "").full_name is None


@pytest.mark.parametrize("nickname", ["ab", "  ", "with space", "dots.not.allowed", "ñandú"])
def test_invalid_nicknames_are_rejected(session: Session, nickname: str) -> None:
    with pytest.raises(ProfileValidationError) as excinfo:
        ProfileService(session).update_profile("alice", nickname, None)

    assert excinfo.value.status_code == 422
    assert session.query(Profile).count() == 0


def test_nickname_taken_by_another_user_conflicts(session: Session) -> None:
    service = ProfileService(session)
    service.update_profile("alice", "dvfan", None)

    with pytest.raises(DuplicateRecordError) as excinfo:
        service.update_profile("bob", "dvfan", "Bob")

    assert excinfo.value.status_code == 409
    assert session.get(Profile, "alice").nickname == "dvfan"


def test_keeping_the_own_nickname_is_allowed(session: Session) -> None:
    service = ProfileService(session)
    service.update_profile("alice", "dvfan", None)

    assert service.update_profile("alice", "dvfan", "Alice").full_name == "Alice"


def test_list_profiles_returns_everyone(session: Session) -> None:
    service = ProfileService(session)
    service.get_profile("alice")
    service.get_profile("bob")

    assert {profile.id for profile in service.list_profiles()} == {"alice", "bob"}
