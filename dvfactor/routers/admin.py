"""Administrator routes over editions, payments, employees, bets and users."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from dvfactor.core.security import require_admin_user
from dvfactor.schemas import (
    BetRead,
    EditionCreate,
    EditionRead,
    EditionStatusUpdate,
    EmployeeCreate,
    EmployeeRead,
    ParticipantRead,
    PaymentUpdateRead,
    PoolRead,
    ProfileRead,
    ResignationCreate,
    RevealRead,
)
from dvfactor.services import (
    BetService,
    EditionService,
    EmployeeService,
    ParticipationService,
    PaymentService,
    PoolService,
    ProfileService,
)
from dvfactor.services.pool_service import PaymentUpdate
from dvfactor.web.dependencies import get_db_session

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin_user)])


def _payment_response(update: PaymentUpdate) -> PaymentUpdateRead:
    return PaymentUpdateRead(
        participant=ParticipantRead.model_validate(update.participant),
        total_pool=update.total_pool,
    )


@router.get("/editions", response_model=list[EditionRead])
def list_editions(session: Session = Depends(get_db_session)) -> list[EditionRead]:
    return [EditionRead.model_validate(edition) for edition in EditionService(session).list_editions()]


@router.post("/editions", response_model=EditionRead, status_code=status.HTTP_201_CREATED)
def create_edition(payload: EditionCreate, session: Session = Depends(get_db_session)) -> EditionRead:
    edition = EditionService(session).create_edition(**payload.model_dump())
    return EditionRead.model_validate(edition)


@router.post("/editions/{edition_id}/status", response_model=EditionRead)
def change_status(
    edition_id: int,
    payload: EditionStatusUpdate,
    session: Session = Depends(get_db_session),
) -> EditionRead:
    edition = EditionService(session).transition(edition_id, payload.status)
    return EditionRead.model_validate(edition)


@router.post("/editions/{edition_id}/recalculate-pool", response_model=PoolRead)
def recalculate_pool(edition_id: int, session: Session = Depends(get_db_session)) -> PoolRead:
    total = PoolService(session).recalculate(edition_id)
    return PoolRead(edition_id=edition_id, total_pool=total)


@router.get("/editions/{edition_id}/participants", response_model=list[ParticipantRead])
def list_participants(edition_id: int, session: Session = Depends(get_db_session)) -> list[ParticipantRead]:
    participants = ParticipationService(session).list_participants(edition_id)
    return [ParticipantRead.model_validate(participant) for participant in participants]


@router.post("/participants/{participant_id}/confirm-payment", response_model=PaymentUpdateRead)
def confirm_payment(participant_id: int, session: Session = Depends(get_db_session)) -> PaymentUpdateRead:
    """Confirm a payment and return the pool recalculated from it."""

    return _payment_response(PaymentService(session).confirm_payment(participant_id))


@router.post("/participants/{participant_id}/cancel-payment", response_model=PaymentUpdateRead)
def cancel_payment(participant_id: int, session: Session = Depends(get_db_session)) -> PaymentUpdateRead:
    return _payment_response(PaymentService(session).cancel_payment(participant_id))


@router.get("/employees", response_model=list[EmployeeRead])
def list_employees(session: Session = Depends(get_db_session)) -> list[EmployeeRead]:
    return [EmployeeRead.model_validate(employee) for employee in EmployeeService(session).list_employees()]


@router.post("/employees", response_model=EmployeeRead, status_code=status.HTTP_201_CREATED)
def add_employee(payload: EmployeeCreate, session: Session = Depends(get_db_session)) -> EmployeeRead:
    employee = EmployeeService(session).add_employee(**payload.model_dump())
    return EmployeeRead.model_validate(employee)


@router.post("/employees/{employee_id}/resignation", response_model=EmployeeRead)
def record_resignation(
    employee_id: int,
    payload: ResignationCreate,
    session: Session = Depends(get_db_session),
) -> EmployeeRead:
    employee = EmployeeService(session).record_resignation(employee_id, payload.resignation_date)
    return EmployeeRead.model_validate(employee)


@router.post("/editions/{edition_id}/reveal-bets", response_model=RevealRead)
def reveal_bets(edition_id: int, session: Session = Depends(get_db_session)) -> RevealRead:
    revealed = BetService(session).reveal_bets(edition_id)
    return RevealRead(edition_id=edition_id, revealed=revealed)


@router.get("/editions/{edition_id}/bets", response_model=list[BetRead])
def list_bets(edition_id: int, session: Session = Depends(get_db_session)) -> list[BetRead]:
    bets = BetService(session).list_bets(edition_id, viewer_id="", is_admin=True)
    return [BetRead.model_validate(bet) for bet in bets]


@router.get("/users", response_model=list[ProfileRead])
def list_users(session: Session = Depends(get_db_session)) -> list[ProfileRead]:
    """Every registered profile, newest first."""

    return [ProfileRead.model_validate(profile) for profile in ProfileService(session).list_profiles()]
