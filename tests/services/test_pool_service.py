"""Tests for pool recalculation and payment confirmation."""
from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from dvfactor.core.errors import NotFoundError
from dvfactor.domain.editions import EditionStatus
from dvfactor.models import EditionParticipant, GameEdition, Profile
from dvfactor.services import PaymentService, PoolService


def _seed_edition(session: Session, *, jackpot: str = "50.00", fee: str = "3.00", participants: int = 14) -> GameEdition:
    edition = GameEdition(
        year=2026,
        entry_fee=Decimal(fee),
        jackpot=Decimal(jackpot),
        start_date=date(2026, 1, 1),
        end_date=date(2026, 12, 31),
        status=EditionStatus.OPEN,
        total_pool=Decimal(jackpot),
    )
    session.add(edition)
    session.flush()
    for index in range(participants):
        user_id = f"user-{index:02d}"
        session.add(Profile(id=user_id))
        session.add(
            EditionParticipant(
                user_id=user_id,
                game_edition_id=edition.id,
                payment_amount=Decimal(fee),
                payment_status=False,
            )
        )
    session.commit()
    return edition


def _participant_ids(session: Session, edition_id: int) -> list[int]:
    return [
        participant.id
        for participant in session.query(EditionParticipant)
        .filter(EditionParticipant.game_edition_id == edition_id)
        .order_by(EditionParticipant.id)
    ]


def test_confirming_payments_grows_the_pool(session: Session) -> None:
    edition = _seed_edition(session)
    payments = PaymentService(session)

    for participant_id in _participant_ids(session, edition.id)[:10]:
        update = payments.confirm_payment(participant_id)

    assert update.total_pool == Decimal("80.00")
    session.refresh(edition)
    assert edition.total_pool == Decimal("80.00")


def test_confirmation_stamps_payment_date(session: Session) -> None:
    edition = _seed_edition(session, participants=1)
    when = datetime(2026, 2, 1, 9, 30, tzinfo=timezone.utc)

    update = PaymentService(session).confirm_payment(_participant_ids(session, edition.id)[0], now=when)

    assert update.participant.payment_status is True
    assert update.participant.payment_date is not None
    assert update.total_pool == Decimal("53.00")


def test_cancelling_a_payment_shrinks_the_pool(session: Session) -> None:
    edition = _seed_edition(session, participants=3)
    payments = PaymentService(session)
    first, second, _ = _participant_ids(session, edition.id)
    payments.confirm_payment(first)
    payments.confirm_payment(second)

    update = payments.cancel_payment(first)

    assert update.participant.payment_status is False
    assert update.participant.payment_date is None
    assert update.total_pool == Decimal("53.00")


def test_recalculation_repairs_a_stale_pool(session: Session) -> None:
    edition = _seed_edition(session, participants=2)
    for participant in session.query(EditionParticipant):
        participant.payment_status = True
    edition.total_pool = Decimal("999.99")
    session.commit()

    service = PoolService(session)

    assert service.recalculate(edition.id) == Decimal("56.00")
    assert service.recalculate(edition.id) == Decimal("56.00")
    session.refresh(edition)
    assert edition.total_pool == Decimal("56.00")


def test_calculate_does_not_store(session: Session) -> None:
    edition = _seed_edition(session, participants=1)
    session.query(EditionParticipant).update({EditionParticipant.payment_status: True})
    session.commit()

    assert PoolService(session).calculate(edition.id) == Decimal("53.00")
    session.refresh(edition)
    assert edition.total_pool == Decimal("50.00")


def test_unknown_records_raise_not_found(session: Session) -> None:
    with pytest.raises(NotFoundError):
        PoolService(session).recalculate(404)
    with pytest.raises(NotFoundError):
        PaymentService(session).confirm_payment(404)
