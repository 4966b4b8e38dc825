"""Payout table and settlement routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dvfactor.core.security import get_authenticated_user
from dvfactor.schemas import PayoutReportRead, PayoutTableRowRead
from dvfactor.services import PayoutService
from dvfactor.web.dependencies import get_db_session

router = APIRouter(tags=["payouts"], dependencies=[Depends(get_authenticated_user)])


@router.get("/payout-table", response_model=list[PayoutTableRowRead])
def payout_table(session: Session = Depends(get_db_session)) -> list[PayoutTableRowRead]:
    """Percentages by resignation month and number of selectors."""

    table = PayoutService(session).payout_table()
    return [PayoutTableRowRead.from_row(row) for row in table.rows]


@router.get("/editions/{edition_id}/payouts", response_model=PayoutReportRead)
def edition_payouts(edition_id: int, session: Session = Depends(get_db_session)) -> PayoutReportRead:
    report = PayoutService(session).payout_report(edition_id)
    return PayoutReportRead.from_report(report)
