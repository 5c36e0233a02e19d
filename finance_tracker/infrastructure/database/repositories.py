"""Data access layer for members, categories, transactions and debts"""

from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from finance_tracker.infrastructure.database.models import (
    CategoryRecord,
    DebtRecord,
    ExpenseRecord,
    InstallmentRecord,
    MemberRecord,
    RevenueRecord,
)
from finance_tracker.domain.exceptions import EntityNotFoundError
from finance_tracker.domain.installments import derive_debt_status
from finance_tracker.domain.models import (
    Debt,
    DebtStatus,
    Expense,
    Frequency,
    Installment,
    Revenue,
    Status,
    TransactionType,
)

DEFAULT_CATEGORIES = [
    ("Salary", TransactionType.REVENUE),
    ("Rent", TransactionType.EXPENSE),
    ("Groceries", TransactionType.EXPENSE),
    ("Freelance", TransactionType.REVENUE),
]


def revenue_to_domain(record: RevenueRecord) -> Revenue:
    return Revenue(
        id=record.id,
        member_id=record.member_id,
        description=record.description,
        value=record.value,
        date=record.date,
        category_id=record.category_id,
        status=Status(record.status),
        is_recurrent=record.is_recurrent,
        frequency=Frequency(record.frequency) if record.frequency else None,
    )


def expense_to_domain(record: ExpenseRecord) -> Expense:
    return Expense(
        id=record.id,
        member_id=record.member_id,
        description=record.description,
        value=record.value,
        due_date=record.due_date,
        category_id=record.category_id,
        payment_method=record.payment_method,
        status=Status(record.status),
        is_recurrent=record.is_recurrent,
        frequency=Frequency(record.frequency) if record.frequency else None,
    )


def installment_to_domain(record: InstallmentRecord) -> Installment:
    return Installment(
        id=record.id,
        debt_id=record.debt_id,
        installment_number=record.installment_number,
        value=record.value,
        due_date=record.due_date,
        status=Status(record.status),
    )


class MemberRepository:
    """Repository for family member profiles"""

    def __init__(self, db: Session):
        self.db = db

    def create_member(self, name: str, email: str) -> MemberRecord:
        db_member = MemberRecord(name=name, email=email)
        self.db.add(db_member)
        self.db.flush()
        return db_member

    def get_member(self, member_id: str) -> Optional[MemberRecord]:
        return self.db.get(MemberRecord, member_id)

    def get_member_by_email(self, email: str) -> Optional[MemberRecord]:
        return self.db.query(MemberRecord).filter(MemberRecord.email == email).first()

    def list_members(self) -> List[MemberRecord]:
        return self.db.query(MemberRecord).order_by(MemberRecord.name).all()


class CategoryRepository:
    """Repository for revenue/expense categories"""

    def __init__(self, db: Session):
        self.db = db

    def seed_defaults(self) -> List[CategoryRecord]:
        """Insert the default categories when none exist yet"""
        if self.db.query(CategoryRecord).first() is not None:
            return []

        seeded = [CategoryRecord(name=name, type=kind.value) for name, kind in DEFAULT_CATEGORIES]
        self.db.add_all(seeded)
        self.db.flush()
        return seeded

    def get_category(self, category_id: str) -> Optional[CategoryRecord]:
        return self.db.get(CategoryRecord, category_id)

    def list_categories(self, kind: Optional[TransactionType] = None) -> List[CategoryRecord]:
        query = self.db.query(CategoryRecord)
        if kind is not None:
            query = query.filter(CategoryRecord.type == kind.value)
        return query.order_by(CategoryRecord.name).all()


class _TransactionRepository:
    """Shared persistence for independent revenue/expense occurrences"""

    record_class = None
    date_field = None
    entity = None

    def __init__(self, db: Session):
        self.db = db

    def _to_record(self, item):
        raise NotImplementedError

    def add_all(self, items: list) -> list:
        """Bulk insert generated occurrences"""
        records = [self._to_record(item) for item in items]
        self.db.add_all(records)
        self.db.flush()
        return records

    def get(self, transaction_id: str):
        return self.db.get(self.record_class, transaction_id)

    def toggle_status(self, transaction_id: str):
        """Flip PENDING <-> PAID for a single occurrence"""
        record = self.get(transaction_id)
        if record is None:
            raise EntityNotFoundError(self.entity, transaction_id)

        record.status = Status.PENDING.value if record.status == Status.PAID.value else Status.PAID.value
        self.db.flush()
        return record

    def delete(self, transaction_id: str) -> None:
        record = self.get(transaction_id)
        if record is None:
            raise EntityNotFoundError(self.entity, transaction_id)
        self.db.delete(record)
        self.db.flush()

    def list_for_member(
        self,
        member_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        before: Optional[date] = None,
    ) -> list:
        """Occurrences of a member, optionally within [start, end] and before ``before``, oldest first"""
        date_column = getattr(self.record_class, self.date_field)
        query = self.db.query(self.record_class).filter(self.record_class.member_id == member_id)
        if start is not None:
            query = query.filter(date_column >= start)
        if end is not None:
            query = query.filter(date_column <= end)
        if before is not None:
            query = query.filter(date_column < before)
        return query.order_by(date_column).all()


class RevenueRepository(_TransactionRepository):
    """Repository for revenues"""

    record_class = RevenueRecord
    date_field = "date"
    entity = "Revenue"

    def _to_record(self, item: Revenue) -> RevenueRecord:
        return RevenueRecord(
            id=item.id,
            member_id=item.member_id,
            description=item.description,
            value=item.value,
            date=item.date,
            category_id=item.category_id,
            status=item.status.value,
            is_recurrent=item.is_recurrent,
            frequency=item.frequency.value if item.frequency else None,
        )


class ExpenseRepository(_TransactionRepository):
    """Repository for one-off and recurring expenses"""

    record_class = ExpenseRecord
    date_field = "due_date"
    entity = "Expense"

    def _to_record(self, item: Expense) -> ExpenseRecord:
        return ExpenseRecord(
            id=item.id,
            member_id=item.member_id,
            description=item.description,
            value=item.value,
            due_date=item.due_date,
            category_id=item.category_id,
            payment_method=item.payment_method,
            status=item.status.value,
            is_recurrent=item.is_recurrent,
            frequency=item.frequency.value if item.frequency else None,
        )


class DebtRepository:
    """Repository for debts and their installments"""

    def __init__(self, db: Session):
        self.db = db

    def create_debt(self, debt: Debt) -> DebtRecord:
        """Persist debt together with its full installment schedule"""
        db_debt = DebtRecord(
            id=debt.id,
            member_id=debt.member_id,
            description=debt.description,
            total_value=debt.total_value,
            start_date=debt.start_date,
            frequency=debt.frequency.value,
            installments_count=debt.installments_count,
            installment_value=debt.installment_value,
            status=debt.status.value,
            category_id=debt.category_id,
        )
        self.db.add(db_debt)
        self.db.flush()

        # Create installments
        for inst in debt.installments:
            db_installment = InstallmentRecord(
                id=inst.id,
                debt_id=db_debt.id,
                installment_number=inst.installment_number,
                value=inst.value,
                due_date=inst.due_date,
                status=inst.status.value,
            )
            self.db.add(db_installment)

        self.db.flush()
        return db_debt

    def get_debt(self, debt_id: str) -> Optional[DebtRecord]:
        """Fetch debt with installments"""
        return self.db.query(DebtRecord).filter(DebtRecord.id == debt_id).first()

    def list_debts(self, member_id: str) -> List[DebtRecord]:
        return (
            self.db.query(DebtRecord)
            .filter(DebtRecord.member_id == member_id)
            .order_by(DebtRecord.start_date, DebtRecord.created_at)
            .all()
        )

    def delete_debt(self, debt_id: str) -> None:
        """Delete a debt and, through the cascade, all of its installments"""
        db_debt = self.get_debt(debt_id)
        if db_debt is None:
            raise EntityNotFoundError("Debt", debt_id)
        self.db.delete(db_debt)
        self.db.flush()

    def installments_for_member(
        self,
        member_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        before: Optional[date] = None,
    ) -> List[Tuple[InstallmentRecord, str]]:
        """Installments of a member's debts with their debt description"""
        query = (
            self.db.query(InstallmentRecord, DebtRecord.description)
            .join(DebtRecord, InstallmentRecord.debt_id == DebtRecord.id)
            .filter(DebtRecord.member_id == member_id)
        )
        if start is not None:
            query = query.filter(InstallmentRecord.due_date >= start)
        if end is not None:
            query = query.filter(InstallmentRecord.due_date <= end)
        if before is not None:
            query = query.filter(InstallmentRecord.due_date < before)
        return query.order_by(InstallmentRecord.due_date).all()


class InstallmentRepository:
    """Repository for installment status changes"""

    def __init__(self, db: Session):
        self.db = db

    def get_installment(self, installment_id: str) -> Optional[InstallmentRecord]:
        return self.db.get(InstallmentRecord, installment_id)

    def lock_debt_query(self, debt_id: str):
        """Query for the parent debt row under SELECT ... FOR UPDATE"""
        return self.db.query(DebtRecord).filter(DebtRecord.id == debt_id).with_for_update()

    def set_status(
        self,
        installment_id: str,
        status: Status,
    ) -> Tuple[InstallmentRecord, DebtRecord, DebtStatus]:
        """
        Change one installment's status and recompute its debt's status.

        The parent debt row is locked (SELECT ... FOR UPDATE) before the write,
        so concurrent changes on sibling installments serialize and each one
        recomputes from the complete, current set of installments. Caller
        commits.

        Returns:
            (installment, debt, previous debt status)
        """
        db_installment = self.get_installment(installment_id)
        if db_installment is None:
            raise EntityNotFoundError("Installment", installment_id)

        db_debt = self.lock_debt_query(db_installment.debt_id).populate_existing().one()
        previous_status = DebtStatus(db_debt.status)

        db_installment.status = status.value
        self.db.flush()

        statuses = [
            row.status
            for row in self.db.query(InstallmentRecord.status).filter(
                InstallmentRecord.debt_id == db_debt.id
            )
        ]
        db_debt.status = derive_debt_status(statuses).value
        self.db.flush()

        return db_installment, db_debt, previous_status
