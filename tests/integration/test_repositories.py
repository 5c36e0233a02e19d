"""Integration tests for persistence of debts, installments and occurrences"""

import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Session
from finance_tracker.domain.exceptions import EntityNotFoundError
from finance_tracker.domain.installments import generate_installments, installment_value
from finance_tracker.domain.models import Debt, DebtStatus, Frequency, Revenue, Status
from finance_tracker.domain.recurrence import expand_recurrence
from finance_tracker.infrastructure.database.models import InstallmentRecord
from finance_tracker.infrastructure.database.repositories import (
    DebtRepository,
    InstallmentRepository,
    RevenueRepository,
)


def create_debt(db: Session, member_id: str, debt_id: str = "debt-1", count: int = 3) -> Debt:
    total = Decimal("300.00")
    debt = Debt(
        id=debt_id,
        member_id=member_id,
        description="Phone",
        total_value=total,
        start_date=date(2024, 6, 1),
        frequency=Frequency.WEEKLY,
        installments_count=count,
        installment_value=installment_value(total, count),
        installments=generate_installments(debt_id, total, count, date(2024, 6, 1), Frequency.WEEKLY),
    )
    DebtRepository(db).create_debt(debt)
    db.commit()
    return debt


def test_create_debt_persists_installments(db: Session, member):
    debt = create_debt(db, member.id)

    db_debt = DebtRepository(db).get_debt(debt.id)
    assert db_debt.status == "ACTIVE"
    assert [i.installment_number for i in db_debt.installments] == [1, 2, 3]
    assert sum(i.value for i in db_debt.installments) == Decimal("300.00")
    assert [i.due_date for i in db_debt.installments] == [date(2024, 6, 1), date(2024, 6, 8), date(2024, 6, 15)]


def test_paying_last_installment_finishes_debt(db: Session, member):
    """Test last PENDING -> PAID flips the debt to FINISHED, and back"""
    debt = create_debt(db, member.id)
    repo = InstallmentRepository(db)
    first, second, third = (inst.id for inst in debt.installments)

    repo.set_status(first, Status.PAID)
    _, db_debt, _ = repo.set_status(second, Status.PAID)
    db.commit()
    assert db_debt.status == DebtStatus.ACTIVE.value

    _, db_debt, previous = repo.set_status(third, Status.PAID)
    db.commit()
    assert previous == DebtStatus.ACTIVE
    assert db_debt.status == DebtStatus.FINISHED.value

    _, db_debt, previous = repo.set_status(second, Status.PENDING)
    db.commit()
    assert previous == DebtStatus.FINISHED
    assert db_debt.status == DebtStatus.ACTIVE.value


def test_status_derivation_only_considers_own_debt(db: Session, member):
    create_debt(db, member.id, debt_id="debt-a", count=1)
    other = create_debt(db, member.id, debt_id="debt-b", count=1)

    _, db_debt, _ = InstallmentRepository(db).set_status(other.installments[0].id, Status.PAID)
    db.commit()

    assert db_debt.id == "debt-b"
    assert db_debt.status == DebtStatus.FINISHED.value
    assert DebtRepository(db).get_debt("debt-a").status == DebtStatus.ACTIVE.value


def test_set_status_unknown_installment(db: Session):
    with pytest.raises(EntityNotFoundError):
        InstallmentRepository(db).set_status("missing", Status.PAID)


def test_delete_debt_cascades(db: Session, member):
    debt = create_debt(db, member.id)

    DebtRepository(db).delete_debt(debt.id)
    db.commit()

    assert DebtRepository(db).get_debt(debt.id) is None
    assert db.query(InstallmentRecord).filter(InstallmentRecord.debt_id == debt.id).count() == 0


def test_delete_one_occurrence_keeps_siblings(db: Session, member, categories):
    template = Revenue(
        id="template",
        member_id=member.id,
        description="Salary",
        value=Decimal("3000.00"),
        date=date(2024, 1, 5),
        category_id=categories["Salary"],
        is_recurrent=True,
        frequency=Frequency.MONTHLY,
    )
    repo = RevenueRepository(db)
    records = repo.add_all(expand_recurrence(template, 3))
    db.commit()

    repo.delete(records[1].id)
    db.commit()

    remaining = repo.list_for_member(member.id)
    assert [r.date for r in remaining] == [date(2024, 1, 5), date(2024, 3, 5)]


def test_toggle_occurrence_status(db: Session, member, categories):
    template = Revenue(
        id="template",
        member_id=member.id,
        description="Bonus",
        value=Decimal("100.00"),
        date=date(2024, 1, 5),
        category_id=categories["Freelance"],
    )
    repo = RevenueRepository(db)
    [record] = repo.add_all(expand_recurrence(template, 1))
    db.commit()

    assert repo.toggle_status(record.id).status == "PAID"
    assert repo.toggle_status(record.id).status == "PENDING"

    with pytest.raises(EntityNotFoundError):
        repo.toggle_status("missing")


def test_set_status_locks_debt_row(db: Session):
    """Test the debt lookup compiles to SELECT ... FOR UPDATE on PostgreSQL"""
    query = InstallmentRepository(db).lock_debt_query("debt-1")

    sql = str(query.statement.compile(dialect=postgresql.dialect()))
    assert "FOR UPDATE" in sql


def test_list_before_date_is_exclusive(db: Session, member):
    debt = create_debt(db, member.id)

    rows = DebtRepository(db).installments_for_member(member.id, before=date(2024, 6, 8))
    assert [inst.id for inst, _ in rows] == [debt.installments[0].id]
    assert DebtRepository(db).installments_for_member(member.id, before=date.min) == []
