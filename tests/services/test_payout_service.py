"""Tests for the payout report facade."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import create_autospec

import pytest
from sqlalchemy.orm import Session

from dvfactor.core.config import GameSettings
from dvfactor.core.errors import NotFoundError, PayoutTableError
from dvfactor.domain.editions import EditionStatus
from dvfactor.domain.payouts import BetEntry, PayoutTableRow, ResignationEntry
from dvfactor.models import (
    Bet,
    EditionParticipant,
    Employee,
    GameEdition,
    PayoutTableEntry,
    Profile,
)
from dvfactor.repositories import (
    BetRepository,
    EditionRepository,
    EmployeeRepository,
    PayoutTableRepository,
)
from dvfactor.services import PayoutService

GAME = GameSettings(rank_shares=(Decimal("70"), Decimal("25"), Decimal("5")), bonus_share=Decimal("60"))


def _edition(total_pool: str = "80.00") -> GameEdition:
    return GameEdition(
        id=1,
        year=2026,
        entry_fee=Decimal("3.00"),
        jackpot=Decimal("50.00"),
        start_date=date(2026, 1, 1),
        end_date=date(2026, 12, 31),
        status=EditionStatus.CLOSED,
        total_pool=Decimal(total_pool),
    )


def _service(
    *,
    edition: GameEdition | None,
    bets: list[BetEntry],
    resignations: list[ResignationEntry],
    rows: list[PayoutTableRow],
) -> PayoutService:
    session = create_autospec(Session, instance=True)
    editions = create_autospec(EditionRepository, instance=True)
    employees = create_autospec(EmployeeRepository, instance=True)
    bet_repository = create_autospec(BetRepository, instance=True)
    payout_table = create_autospec(PayoutTableRepository, instance=True)
    editions.get.return_value = edition
    bet_repository.list_bet_entries.return_value = bets
    employees.list_resignations.return_value = resignations
    payout_table.list_rows.return_value = rows
    return PayoutService(
        session,
        editions=editions,
        employees=employees,
        bets=bet_repository,
        payout_table=payout_table,
        game_settings=GAME,
    )


def test_report_uses_stored_total_pool() -> None:
    service = _service(
        edition=_edition(),
        bets=[
            BetEntry(user_id="alice", employee_ids=(1, 2, 3)),
            BetEntry(user_id="bob", employee_ids=(1, 4, 5), bonus_employee_id=1),
        ],
        resignations=[ResignationEntry(employee_id=1, resignation_date=date(2026, 3, 15))],
        rows=[PayoutTableRow(month=3, bettors_count=1, percentage=Decimal("50")),
              PayoutTableRow(month=3, bettors_count=2, percentage=Decimal("40"))],
    )

    report = service.payout_report(1)

    assert report.total_pool == Decimal("80.00")
    assert report.totals == {"alice": Decimal("8.96"), "bob": Decimal("13.44")}
    assert report.unallocated == Decimal("57.60")


def test_empty_payout_table_is_a_configuration_error() -> None:
    service = _service(edition=_edition(), bets=[], resignations=[], rows=[])

    with pytest.raises(PayoutTableError):
        service.payout_table()


def test_table_gap_reports_the_edition() -> None:
    service = _service(
        edition=_edition(),
        bets=[BetEntry(user_id="alice", employee_ids=(1, 2, 3))],
        resignations=[ResignationEntry(employee_id=2, resignation_date=date(2026, 8, 1))],
        rows=[PayoutTableRow(month=3, bettors_count=1, percentage=Decimal("50"))],
    )

    with pytest.raises(PayoutTableError) as excinfo:
        service.payout_report(1)

    assert excinfo.value.context["edition_id"] == 1
    assert excinfo.value.context["month"] == 8


def test_unknown_edition_raises_not_found() -> None:
    service = _service(edition=None, bets=[], resignations=[], rows=[])

    with pytest.raises(NotFoundError):
        service.payout_report(99)


def test_report_from_the_database(session: Session) -> None:
    edition = GameEdition(
        year=2026,
        entry_fee=Decimal("3.00"),
        jackpot=Decimal("50.00"),
        start_date=date(2026, 1, 1),
        end_date=date(2026, 12, 31),
        status=EditionStatus.CLOSED,
        total_pool=Decimal("80.00"),
    )
    session.add(edition)
    session.add_all(
        [
            Employee(id=1, first_name="Ana", last_name="Ruiz", is_active=False,
                     resignation_date=date(2026, 3, 15), resignation_month=3),
            Employee(id=2, first_name="Luis", last_name="Gil", is_active=True),
            Employee(id=3, first_name="Eva", last_name="Sanz", is_active=True),
            Employee(id=4, first_name="Pau", last_name="Vila", is_active=True),
        ]
    )
    session.add_all(
        PayoutTableEntry(month=3, bettors_count=count, percentage=Decimal(percentage))
        for count, percentage in ((1, "50"), (2, "40"), (3, "20"))
    )
    session.flush()
    for user_id, paid, employees, bonus in (
        ("alice", True, (1, 2, 3), None),
        ("bob", True, (1, 2, 4), 1),
        ("carol", False, (1, 3, 4), 1),
    ):
        session.add(Profile(id=user_id))
        session.add(
            EditionParticipant(
                user_id=user_id,
                game_edition_id=edition.id,
                payment_amount=Decimal("3.00"),
                payment_status=paid,
            )
        )
        session.add(
            Bet(
                user_id=user_id,
                game_edition_id=edition.id,
                employee_1_id=employees[0],
                employee_2_id=employees[1],
                employee_3_id=employees[2],
                chiringuito_employee_id=bonus,
            )
        )
    session.commit()

    report = PayoutService(session, game_settings=GAME).payout_report(edition.id)

    assert len(report.events) == 1
    event = report.events[0]
    assert event.selector_count == 2
    assert event.percentage == Decimal("40")
    assert {share.user_id: share.amount for share in event.shares} == {
        "alice": Decimal("8.96"),
        "bob": Decimal("13.44"),
    }
