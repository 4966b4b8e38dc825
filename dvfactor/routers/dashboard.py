"""Player routes: profile, enrollment, own bet and visible bets."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from dvfactor.core.security import AuthenticatedUser, get_authenticated_user
from dvfactor.schemas import (
    BetRead,
    BetSubmit,
    EditionRead,
    EmployeeRead,
    ParticipantRead,
    ProfileRead,
    ProfileUpdate,
)
from dvfactor.services import (
    BetService,
    EditionService,
    EmployeeService,
    ParticipationService,
    ProfileService,
)
from dvfactor.web.dependencies import get_db_session

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(get_authenticated_user)],
)


@router.get("/edition", response_model=EditionRead)
def current_edition(session: Session = Depends(get_db_session)) -> EditionRead:
    """Return the edition currently open for bets."""

    edition = EditionService(session).get_current_edition()
    if edition is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No open edition")
    return EditionRead.model_validate(edition)


@router.post("/editions/{edition_id}/participation", response_model=ParticipantRead)
def enroll(
    edition_id: int,
    user: AuthenticatedUser = Depends(get_authenticated_user),
    session: Session = Depends(get_db_session),
) -> ParticipantRead:
    """Return the caller's participation, creating it on the first visit."""

    participant = ParticipationService(session).enroll(user.user_id, edition_id, email=user.email)
    return ParticipantRead.model_validate(participant)


@router.get("/employees", response_model=list[EmployeeRead])
def active_employees(session: Session = Depends(get_db_session)) -> list[EmployeeRead]:
    employees = EmployeeService(session).list_employees(active_only=True)
    return [EmployeeRead.model_validate(employee) for employee in employees]


@router.get("/editions/{edition_id}/bet", response_model=BetRead)
def my_bet(
    edition_id: int,
    user: AuthenticatedUser = Depends(get_authenticated_user),
    session: Session = Depends(get_db_session),
) -> BetRead:
    bet = BetService(session).get_bet(user.user_id, edition_id)
    if bet is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No bet placed yet")
    return BetRead.model_validate(bet)


@router.put("/editions/{edition_id}/bet", response_model=BetRead)
def submit_bet(
    edition_id: int,
    payload: BetSubmit,
    user: AuthenticatedUser = Depends(get_authenticated_user),
    session: Session = Depends(get_db_session),
) -> BetRead:
    """Create or replace the caller's bet while the edition is open."""

    bet = BetService(session).submit_bet(
        user.user_id,
        edition_id,
        payload.employee_ids,
        payload.chiringuito_employee_id,
    )
    return BetRead.model_validate(bet)


@router.get("/editions/{edition_id}/bets", response_model=list[BetRead])
def visible_bets(
    edition_id: int,
    user: AuthenticatedUser = Depends(get_authenticated_user),
    session: Session = Depends(get_db_session),
) -> list[BetRead]:
    """Revealed bets of everyone plus the caller's own bet."""

    bets = BetService(session).list_bets(edition_id, viewer_id=user.user_id, is_admin=False)
    return [BetRead.model_validate(bet) for bet in bets]


@router.get("/profile", response_model=ProfileRead)
def my_profile(
    user: AuthenticatedUser = Depends(get_authenticated_user),
    session: Session = Depends(get_db_session),
) -> ProfileRead:
    profile = ProfileService(session).get_profile(user.user_id, email=user.email)
    return ProfileRead.model_validate(profile)


@router.patch("/profile", response_model=ProfileRead)
def update_profile(
    payload: ProfileUpdate,
    user: AuthenticatedUser = Depends(get_authenticated_user),
    session: Session = Depends(get_db_session),
) -> ProfileRead:
    """Change the caller's nickname and full name."""

    profile = ProfileService(session).update_profile(user.user_id, payload.nickname, payload.full_name)
    return ProfileRead.model_validate(profile)
