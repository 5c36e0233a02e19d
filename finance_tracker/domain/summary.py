"""Monthly aggregates and settled-transactions statement"""

from datetime import date
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional
from finance_tracker.domain.models import (
    Expense,
    Installment,
    MonthlySummary,
    Revenue,
    StatementEntry,
    Status,
    TransactionType,
)
from finance_tracker.utils.date_utils import month_bounds

ZERO = Decimal("0.00")


def to_entries(
    revenues: Iterable[Revenue],
    expenses: Iterable[Expense],
    installments: Iterable[Installment],
    debt_descriptions: Mapping[str, str],
) -> List[StatementEntry]:
    """Flatten revenues, expenses and installments into one listing"""
    entries = [
        StatementEntry(
            id=r.id,
            type=TransactionType.REVENUE,
            description=r.description,
            value=r.value,
            date=r.date,
            status=r.status,
            category_id=r.category_id,
        )
        for r in revenues
    ]
    entries.extend(
        StatementEntry(
            id=e.id,
            type=TransactionType.EXPENSE,
            description=e.description,
            value=e.value,
            date=e.due_date,
            status=e.status,
            category_id=e.category_id,
        )
        for e in expenses
    )
    entries.extend(
        StatementEntry(
            id=i.id,
            type=TransactionType.EXPENSE,
            description=debt_descriptions.get(i.debt_id, "Installment"),
            value=i.value,
            date=i.due_date,
            status=i.status,
        )
        for i in installments
    )
    return entries


def _total(entries: Iterable[StatementEntry]) -> Decimal:
    return sum((e.value for e in entries), ZERO)


def summarize_month(
    year: int,
    month: int,
    revenues: Iterable[Revenue],
    expenses: Iterable[Expense],
    installments: Iterable[Installment],
    debt_descriptions: Mapping[str, str],
    recent_limit: int = 10,
) -> MonthlySummary:
    """
    Aggregate one member's month.

    Expenses and installments due in the month both count as expense; "paid"
    and "received" only count PAID records. Records outside the month are
    ignored, so callers may pass a wider window.
    """
    first_day, last_day = month_bounds(year, month)
    entries = [
        e
        for e in to_entries(revenues, expenses, installments, debt_descriptions)
        if first_day <= e.date <= last_day
    ]

    incoming = [e for e in entries if e.type == TransactionType.REVENUE]
    outgoing = [e for e in entries if e.type == TransactionType.EXPENSE]

    total_revenue = _total(incoming)
    total_expense = _total(outgoing)

    recent = sorted(entries, key=lambda e: e.date, reverse=True)[:recent_limit]

    return MonthlySummary(
        year=year,
        month=month,
        total_revenue=total_revenue,
        received_revenue=_total(e for e in incoming if e.status == Status.PAID),
        total_expense=total_expense,
        total_paid=_total(e for e in outgoing if e.status == Status.PAID),
        final_balance=total_revenue - total_expense,
        recent=recent,
    )


def build_statement(
    entries: Iterable[StatementEntry],
    entry_type: Optional[TransactionType] = None,
    until: Optional[date] = None,
) -> List[StatementEntry]:
    """Settled (PAID) entries, newest first, optionally by type and before ``until``"""
    selected = [
        e
        for e in entries
        if e.status == Status.PAID
        and (entry_type is None or e.type == entry_type)
        and (until is None or e.date < until)
    ]
    return sorted(selected, key=lambda e: e.date, reverse=True)
