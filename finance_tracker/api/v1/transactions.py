"""Revenues and expenses: creation (with recurrence expansion), status toggle, deletion"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import (
    ExpenseBatchResponse,
    ExpenseCreate,
    ExpenseSchema,
    RevenueBatchResponse,
    RevenueCreate,
    RevenueSchema,
)
from finance_tracker.api.dependencies import get_request_id, load_category, load_member
from finance_tracker.domain.exceptions import CategoryMismatchError, EntityNotFoundError, InvalidRecurrenceError
from finance_tracker.domain.models import Expense, Revenue, TransactionType
from finance_tracker.domain.recurrence import expand_recurrence, new_occurrence_id
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import (
    ExpenseRepository,
    RevenueRepository,
    expense_to_domain,
    revenue_to_domain,
)
from finance_tracker.infrastructure.observability.metrics import occurrences_generated_counter
from finance_tracker.infrastructure.observability.logging import log_recurrence_expanded

router = APIRouter()


def _revenue_schema(record) -> RevenueSchema:
    return RevenueSchema(**vars(revenue_to_domain(record)))


def _expense_schema(record) -> ExpenseSchema:
    return ExpenseSchema(**vars(expense_to_domain(record)))


@router.post("/revenues", response_model=RevenueBatchResponse, status_code=201)
def create_revenue(request_body: RevenueCreate, request: Request, db: Session = Depends(get_db)):
    """
    Record a revenue.

    A recurrent revenue is expanded into ``repetitions`` independent
    occurrences, one per period starting at ``date``.
    """
    request_id = get_request_id(request)

    try:
        load_member(db, request_body.member_id)
        load_category(db, request_body.category_id, TransactionType.REVENUE)

        template = Revenue(
            id=new_occurrence_id(),
            member_id=request_body.member_id,
            description=request_body.description,
            value=request_body.value,
            date=request_body.date,
            category_id=request_body.category_id,
            is_recurrent=request_body.is_recurrent,
            frequency=request_body.frequency,
        )
        occurrences = expand_recurrence(template, request_body.repetitions)
        records = RevenueRepository(db).add_all(occurrences)
        db.commit()

    except EntityNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except (CategoryMismatchError, InvalidRecurrenceError) as e:
        db.rollback()
        logging.warning(f"Rejected revenue: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    occurrences_generated_counter.labels(kind="revenue").inc(len(records))
    log_recurrence_expanded(request_id, request_body.member_id, "revenue", len(records))

    return RevenueBatchResponse(revenues=[_revenue_schema(r) for r in records])


@router.post("/expenses", response_model=ExpenseBatchResponse, status_code=201)
def create_expense(request_body: ExpenseCreate, request: Request, db: Session = Depends(get_db)):
    """
    Record an expense.

    A recurrent expense is expanded into ``repetitions`` independent
    occurrences, one per period starting at ``due_date``.
    """
    request_id = get_request_id(request)

    try:
        load_member(db, request_body.member_id)
        load_category(db, request_body.category_id, TransactionType.EXPENSE)

        template = Expense(
            id=new_occurrence_id(),
            member_id=request_body.member_id,
            description=request_body.description,
            value=request_body.value,
            due_date=request_body.due_date,
            category_id=request_body.category_id,
            payment_method=request_body.payment_method,
            is_recurrent=request_body.is_recurrent,
            frequency=request_body.frequency,
        )
        occurrences = expand_recurrence(template, request_body.repetitions)
        records = ExpenseRepository(db).add_all(occurrences)
        db.commit()

    except EntityNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except (CategoryMismatchError, InvalidRecurrenceError) as e:
        db.rollback()
        logging.warning(f"Rejected expense: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    occurrences_generated_counter.labels(kind="expense").inc(len(records))
    log_recurrence_expanded(request_id, request_body.member_id, "expense", len(records))

    return ExpenseBatchResponse(expenses=[_expense_schema(r) for r in records])


@router.post("/revenues/{revenue_id}/toggle", response_model=RevenueSchema)
def toggle_revenue(revenue_id: str, db: Session = Depends(get_db)):
    """Flip a single revenue occurrence between PENDING and PAID"""
    try:
        record = RevenueRepository(db).toggle_status(revenue_id)
        db.commit()
    except EntityNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    return _revenue_schema(record)


@router.post("/expenses/{expense_id}/toggle", response_model=ExpenseSchema)
def toggle_expense(expense_id: str, db: Session = Depends(get_db)):
    """Flip a single expense occurrence between PENDING and PAID"""
    try:
        record = ExpenseRepository(db).toggle_status(expense_id)
        db.commit()
    except EntityNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    return _expense_schema(record)


@router.delete("/revenues/{revenue_id}", status_code=204)
def delete_revenue(revenue_id: str, db: Session = Depends(get_db)):
    """Delete one occurrence; sibling occurrences are untouched"""
    try:
        RevenueRepository(db).delete(revenue_id)
        db.commit()
    except EntityNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/expenses/{expense_id}", status_code=204)
def delete_expense(expense_id: str, db: Session = Depends(get_db)):
    """Delete one occurrence; sibling occurrences are untouched"""
    try:
        ExpenseRepository(db).delete(expense_id)
        db.commit()
    except EntityNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
