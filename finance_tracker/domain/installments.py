"""Installment plan generation for debts"""

import math
import uuid
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, List, Optional
from finance_tracker.domain.exceptions import InvalidSplitError
from finance_tracker.domain.models import DebtStatus, Frequency, Installment, Status
from finance_tracker.domain.schedule import advance

CENT = Decimal("0.01")

INSTALLMENT_FREQUENCIES = frozenset(
    {Frequency.WEEKLY, Frequency.BIWEEKLY, Frequency.MONTHLY, Frequency.YEARLY}
)

# Fixed namespace so installment ids are reproducible across processes
INSTALLMENT_NAMESPACE = uuid.UUID("6f1c3b0e-2d4a-5e8b-9c7d-0a1b2c3d4e5f")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Convert to Decimal without inheriting binary float noise"""
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidSplitError(f"Total value must be finite, got {value}")
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidSplitError(f"Invalid monetary amount: {value!r}") from e


def to_cents(value: Decimal) -> int:
    return int((value / CENT).to_integral_value(rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) * CENT).quantize(CENT)


def validate_split(
    total_value: Decimal | int | float | str,
    count: int,
    frequency: Frequency,
    start_date: Optional[date] = None,
) -> int:
    """
    Check a debt can be split and return its total in cents.

    Raises:
        InvalidSplitError: count not a positive integer, total not a finite
            positive amount with at most two decimal places, fewer cents than
            installments, a frequency that installment plans do not use
            (DAILY), or a last due date past the calendar's range
    """
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise InvalidSplitError(f"Installment count must be a positive integer, got {count!r}")

    total = to_money(total_value)
    if not total.is_finite() or total <= 0:
        raise InvalidSplitError(f"Total value must be a finite positive amount, got {total_value}")

    # Sub-cent totals cannot be split with an exact sum
    try:
        whole_cents = total == total.quantize(CENT)
    except InvalidOperation as e:
        raise InvalidSplitError(f"Total value out of range: {total_value}") from e
    if not whole_cents:
        raise InvalidSplitError(f"Total value must be a whole number of cents, got {total_value}")

    total_cents = to_cents(total)
    if total_cents < count:
        raise InvalidSplitError(
            f"Cannot split {from_cents(total_cents)} into {count} non-zero installments"
        )

    if frequency not in INSTALLMENT_FREQUENCIES:
        raise InvalidSplitError(f"Frequency {frequency} is not allowed for installment plans")

    if start_date is not None:
        try:
            advance(start_date, frequency, count - 1)
        except (ValueError, OverflowError) as e:
            raise InvalidSplitError(
                f"{count} {Frequency(frequency).value} installments from {start_date} end after {date.max}"
            ) from e

    return total_cents


def split_total(total_value: Decimal | int | float | str, count: int) -> List[Decimal]:
    """
    Split a total into ``count`` cent-exact shares.

    Last share absorbs the rounding remainder so the shares sum to the total:
        100.00 / 3 -> [33.33, 33.33, 33.34]
    """
    total_cents = to_cents(to_money(total_value))
    base_amount = total_cents // count
    remainder = total_cents % count
    return [
        from_cents(base_amount + (remainder if i == count - 1 else 0))
        for i in range(count)
    ]


def installment_value(total_value: Decimal | int | float | str, count: int) -> Decimal:
    """Base share shown on the debt (the last installment may carry extra cents)"""
    return from_cents(to_cents(to_money(total_value)) // count)


def installment_id(debt_id: str, installment_number: int) -> str:
    """Deterministic id for the n-th installment of a debt"""
    return str(uuid.uuid5(INSTALLMENT_NAMESPACE, f"{debt_id}:{installment_number}"))


def generate_installments(
    debt_id: str,
    total_value: Decimal | int | float | str,
    count: int,
    start_date: date,
    frequency: Frequency,
) -> List[Installment]:
    """
    Generate the full installment schedule of a debt.

    Requirements:
    - Exactly ``count`` installments numbered 1..count
    - Installment 1 is due on ``start_date``; installment i on start_date
      advanced by (i - 1) periods of ``frequency``
    - Values sum exactly to the total (last installment absorbs the remainder)
    - Ids depend only on (debt_id, installment_number)

    Example:
        1200.00 in 12 MONTHLY from 2024-01-31
        -> 12 x 100.00 due 2024-01-31, 2024-02-29, 2024-03-31, ...

    Raises:
        InvalidSplitError: rejected before anything is generated
    """
    validate_split(total_value, count, frequency, start_date)

    installments = []
    for number, value in enumerate(split_total(total_value, count), start=1):
        installments.append(
            Installment(
                id=installment_id(debt_id, number),
                debt_id=debt_id,
                installment_number=number,
                value=value,
                due_date=advance(start_date, frequency, number - 1),
                status=Status.PENDING,
            )
        )

    return installments


def derive_debt_status(statuses: Iterable[Status | str]) -> DebtStatus:
    """FINISHED if and only if every installment is PAID"""
    statuses = [Status(s) for s in statuses]
    if statuses and all(s == Status.PAID for s in statuses):
        return DebtStatus.FINISHED
    return DebtStatus.ACTIVE
