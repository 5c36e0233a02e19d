"""Debts (installment plans) and installment settlement"""

import uuid
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import (
    DebtCreate,
    DebtListResponse,
    DebtResponse,
    InstallmentSchema,
    InstallmentStatusResponse,
    InstallmentStatusUpdate,
)
from finance_tracker.api.dependencies import get_request_id, load_category, load_member
from finance_tracker.domain.exceptions import CategoryMismatchError, EntityNotFoundError, InvalidSplitError
from finance_tracker.domain.installments import generate_installments, installment_value
from finance_tracker.domain.models import Debt, DebtStatus, TransactionType
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import DebtRepository, InstallmentRepository
from finance_tracker.infrastructure.observability.metrics import record_debt_created, record_installment_status
from finance_tracker.infrastructure.observability.logging import log_debt_created, log_installment_status

router = APIRouter()


def _installment_schema(inst) -> InstallmentSchema:
    return InstallmentSchema(
        installment_id=inst.id,
        installment_number=inst.installment_number,
        value=inst.value,
        due_date=inst.due_date,
        status=inst.status,
    )


def _debt_response(debt) -> DebtResponse:
    return DebtResponse(
        debt_id=debt.id,
        member_id=debt.member_id,
        description=debt.description,
        total_value=debt.total_value,
        start_date=debt.start_date,
        frequency=debt.frequency,
        installments_count=debt.installments_count,
        installment_value=debt.installment_value,
        status=debt.status,
        category_id=debt.category_id,
        installments=[_installment_schema(inst) for inst in debt.installments],
    )


@router.post("/debts", response_model=DebtResponse, status_code=201)
def create_debt(request_body: DebtCreate, request: Request, db: Session = Depends(get_db)):
    """
    Create a debt together with its full installment schedule.

    Flow:
    1. Check member and (optional) expense category
    2. Generate installments (rejects invalid splits before anything is stored)
    3. Persist debt + installments in one transaction
    """
    request_id = get_request_id(request)
    debt_id = str(uuid.uuid4())

    try:
        load_member(db, request_body.member_id)
        load_category(db, request_body.category_id, TransactionType.EXPENSE)

        installments = generate_installments(
            debt_id,
            request_body.total_value,
            request_body.installments_count,
            request_body.start_date,
            request_body.frequency,
        )
        debt = Debt(
            id=debt_id,
            member_id=request_body.member_id,
            description=request_body.description,
            total_value=request_body.total_value,
            start_date=request_body.start_date,
            frequency=request_body.frequency,
            installments_count=request_body.installments_count,
            installment_value=installment_value(request_body.total_value, request_body.installments_count),
            status=DebtStatus.ACTIVE,
            category_id=request_body.category_id,
            installments=installments,
        )
        db_debt = DebtRepository(db).create_debt(debt)
        db.commit()

    except EntityNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except (InvalidSplitError, CategoryMismatchError) as e:
        db.rollback()
        logging.warning(f"Rejected debt: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    record_debt_created(debt.frequency.value, len(installments))
    log_debt_created(request_id, debt.member_id, debt_id, len(installments), debt.frequency.value)

    return _debt_response(db_debt)


@router.get("/debts", response_model=DebtListResponse)
def list_debts(member_id: str = Query(..., description="Owning member"), db: Session = Depends(get_db)):
    debts = DebtRepository(db).list_debts(member_id)
    return DebtListResponse(member_id=member_id, debts=[_debt_response(d) for d in debts])


@router.get("/debts/{debt_id}", response_model=DebtResponse)
def get_debt(debt_id: str, db: Session = Depends(get_db)):
    """Retrieve a debt with its installment schedule"""
    debt = DebtRepository(db).get_debt(debt_id)
    if not debt:
        raise HTTPException(status_code=404, detail="Debt not found")
    return _debt_response(debt)


@router.delete("/debts/{debt_id}", status_code=204)
def delete_debt(debt_id: str, db: Session = Depends(get_db)):
    """Delete a debt and all of its installments"""
    try:
        DebtRepository(db).delete_debt(debt_id)
        db.commit()
    except EntityNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/installments/{installment_id}", response_model=InstallmentStatusResponse)
def update_installment_status(
    installment_id: str,
    request_body: InstallmentStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Mark an installment PAID or PENDING.

    The parent debt becomes FINISHED when every installment is PAID and
    returns to ACTIVE as soon as any installment is PENDING again.
    """
    request_id = get_request_id(request)

    try:
        db_installment, db_debt, previous_status = InstallmentRepository(db).set_status(
            installment_id, request_body.status
        )
        db.commit()
    except EntityNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    record_installment_status(request_body.status.value, previous_status.value, db_debt.status)
    log_installment_status(
        request_id,
        installment_id,
        db_debt.id,
        request_body.status.value,
        previous_status.value,
        db_debt.status,
    )

    return InstallmentStatusResponse(
        installment=_installment_schema(db_installment),
        debt_id=db_debt.id,
        debt_status=db_debt.status,
    )
