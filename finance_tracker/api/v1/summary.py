"""GET /v1/summary and /v1/statement - monthly aggregates and settled entries"""

from dataclasses import asdict
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import StatementEntrySchema, StatementResponse, SummaryResponse
from finance_tracker.api.dependencies import load_member
from finance_tracker.config import settings
from finance_tracker.domain.exceptions import EntityNotFoundError
from finance_tracker.domain.models import TransactionType
from finance_tracker.domain.summary import build_statement, summarize_month, to_entries
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import (
    DebtRepository,
    ExpenseRepository,
    RevenueRepository,
    expense_to_domain,
    installment_to_domain,
    revenue_to_domain,
)
from finance_tracker.utils.date_utils import month_bounds

router = APIRouter()


def _load_entries(
    db: Session,
    member_id: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
    before: Optional[date] = None,
):
    """Member's revenues, expenses and installments in [start, end] and before ``before``"""
    revenues = [revenue_to_domain(r) for r in RevenueRepository(db).list_for_member(member_id, start, end, before)]
    expenses = [expense_to_domain(e) for e in ExpenseRepository(db).list_for_member(member_id, start, end, before)]

    installments = []
    debt_descriptions = {}
    for inst, description in DebtRepository(db).installments_for_member(member_id, start, end, before):
        installments.append(installment_to_domain(inst))
        debt_descriptions[inst.debt_id] = description

    return revenues, expenses, installments, debt_descriptions


@router.get("/summary", response_model=SummaryResponse)
def get_monthly_summary(
    member_id: str = Query(..., description="Member identifier"),
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db),
):
    """
    Monthly totals for a member.

    Returns:
        Revenue/expense totals, what is already received/paid, the balance and
        the most recent entries of the month
    """
    try:
        load_member(db, member_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    start, end = month_bounds(year, month)
    revenues, expenses, installments, debt_descriptions = _load_entries(db, member_id, start, end)

    summary = summarize_month(
        year,
        month,
        revenues,
        expenses,
        installments,
        debt_descriptions,
        recent_limit=settings.recent_entries_limit,
    )

    return SummaryResponse(
        member_id=member_id,
        year=summary.year,
        month=summary.month,
        total_revenue=summary.total_revenue,
        received_revenue=summary.received_revenue,
        total_expense=summary.total_expense,
        total_paid=summary.total_paid,
        final_balance=summary.final_balance,
        recent=[StatementEntrySchema(**asdict(e)) for e in summary.recent],
    )


@router.get("/statement", response_model=StatementResponse)
def get_statement(
    member_id: str = Query(..., description="Member identifier"),
    type: Optional[TransactionType] = Query(None, description="REVENUE or EXPENSE"),
    until: Optional[date] = Query(None, description="Only entries dated before this day"),
    db: Session = Depends(get_db),
):
    """Settled (PAID) entries of a member, newest first"""
    try:
        load_member(db, member_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    revenues, expenses, installments, debt_descriptions = _load_entries(db, member_id, before=until)

    entries = build_statement(
        to_entries(revenues, expenses, installments, debt_descriptions),
        entry_type=type,
        until=until,
    )
    return StatementResponse(
        member_id=member_id,
        entries=[StatementEntrySchema(**asdict(e)) for e in entries],
    )
