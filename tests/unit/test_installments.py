"""Unit tests for installment plan generation"""

import pytest
from datetime import date
from decimal import Decimal
from finance_tracker.domain.exceptions import InvalidSplitError
from finance_tracker.domain.installments import (
    derive_debt_status,
    generate_installments,
    installment_id,
    installment_value,
    split_total,
)
from finance_tracker.domain.models import DebtStatus, Frequency, Status


def test_generate_installments_monthly_month_end():
    """Test 1200.00 over 12 months from Jan 31 clamps each month end"""
    installments = generate_installments("D1", Decimal("1200.00"), 12, date(2024, 1, 31), Frequency.MONTHLY)

    assert len(installments) == 12
    assert all(inst.value == Decimal("100.00") for inst in installments)
    assert installments[0].due_date == date(2024, 1, 31)
    assert installments[1].due_date == date(2024, 2, 29)
    assert installments[2].due_date == date(2024, 3, 31)  # Not carried from Feb 29
    assert installments[3].due_date == date(2024, 4, 30)
    assert installments[11].due_date == date(2024, 12, 31)


def test_generate_installments_weekly():
    """Test weekly plan is 7 days apart starting on the start date"""
    installments = generate_installments("D2", Decimal("300.00"), 3, date(2024, 6, 1), Frequency.WEEKLY)

    assert [inst.due_date for inst in installments] == [
        date(2024, 6, 1),
        date(2024, 6, 8),
        date(2024, 6, 15),
    ]
    assert [inst.value for inst in installments] == [Decimal("100.00")] * 3


def test_generate_installments_biweekly_is_fifteen_days():
    installments = generate_installments("D3", Decimal("90.00"), 3, date(2024, 1, 1), Frequency.BIWEEKLY)

    assert [inst.due_date for inst in installments] == [
        date(2024, 1, 1),
        date(2024, 1, 16),
        date(2024, 1, 31),
    ]


def test_generate_installments_yearly_from_leap_day():
    installments = generate_installments("D4", Decimal("400.00"), 5, date(2024, 2, 29), Frequency.YEARLY)

    assert [inst.due_date for inst in installments] == [
        date(2024, 2, 29),
        date(2025, 2, 28),
        date(2026, 2, 28),
        date(2027, 2, 28),
        date(2028, 2, 29),
    ]


def test_generate_installments_numbering_and_status():
    installments = generate_installments("D5", Decimal("500.00"), 7, date(2024, 5, 10), Frequency.MONTHLY)

    assert [inst.installment_number for inst in installments] == list(range(1, 8))
    assert all(inst.status == Status.PENDING for inst in installments)
    assert all(inst.debt_id == "D5" for inst in installments)


@pytest.mark.parametrize("frequency", [Frequency.WEEKLY, Frequency.BIWEEKLY, Frequency.MONTHLY, Frequency.YEARLY])
def test_generate_installments_dates_strictly_increasing(frequency):
    installments = generate_installments("D6", Decimal("1000.00"), 24, date(2024, 1, 31), frequency)

    due_dates = [inst.due_date for inst in installments]
    assert all(earlier < later for earlier, later in zip(due_dates, due_dates[1:]))


def test_generate_installments_rounding_remainder_on_last():
    """Test last installment absorbs remainder so the sum is exact"""
    installments = generate_installments("D7", Decimal("100.00"), 3, date(2024, 1, 1), Frequency.MONTHLY)

    assert [inst.value for inst in installments] == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
    assert sum(inst.value for inst in installments) == Decimal("100.00")


def test_generate_installments_float_total_is_exact():
    """Test float input does not leak binary noise into the cents"""
    installments = generate_installments("D8", 0.3, 3, date(2024, 1, 1), Frequency.WEEKLY)

    assert [inst.value for inst in installments] == [Decimal("0.10")] * 3


def test_generate_installments_is_deterministic():
    """Test identical inputs give identical ids, numbers, values and dates"""
    first = generate_installments("D9", Decimal("250.00"), 4, date(2024, 8, 31), Frequency.MONTHLY)
    second = generate_installments("D9", Decimal("250.00"), 4, date(2024, 8, 31), Frequency.MONTHLY)

    assert first == second
    assert first[2].id == installment_id("D9", 3)
    assert len({inst.id for inst in first}) == 4


def test_installment_id_depends_on_debt_and_number():
    assert installment_id("D1", 1) == installment_id("D1", 1)
    assert installment_id("D1", 1) != installment_id("D1", 2)
    assert installment_id("D1", 1) != installment_id("D2", 1)


@pytest.mark.parametrize("count", [0, -3])
def test_generate_installments_rejects_non_positive_count(count):
    with pytest.raises(InvalidSplitError):
        generate_installments("D10", Decimal("100.00"), count, date(2024, 1, 1), Frequency.MONTHLY)


@pytest.mark.parametrize("total", [Decimal("0"), Decimal("-50.00"), float("nan"), float("inf"), "abc"])
def test_generate_installments_rejects_invalid_total(total):
    with pytest.raises(InvalidSplitError):
        generate_installments("D11", total, 3, date(2024, 1, 1), Frequency.MONTHLY)


def test_generate_installments_rejects_zero_value_shares():
    """Test 0.02 cannot be split into 3 installments without a zero share"""
    with pytest.raises(InvalidSplitError):
        generate_installments("D12", Decimal("0.02"), 3, date(2024, 1, 1), Frequency.MONTHLY)


def test_generate_installments_rejects_daily_frequency():
    with pytest.raises(InvalidSplitError):
        generate_installments("D13", Decimal("100.00"), 2, date(2024, 1, 1), Frequency.DAILY)


def test_split_total_and_base_value():
    assert split_total(Decimal("10.00"), 4) == [Decimal("2.50")] * 4
    assert split_total(Decimal("400.03"), 4)[-1] == Decimal("100.03")
    assert installment_value(Decimal("400.03"), 4) == Decimal("100.00")


def test_derive_debt_status():
    assert derive_debt_status([Status.PAID, Status.PAID]) == DebtStatus.FINISHED
    assert derive_debt_status([Status.PAID, Status.PENDING]) == DebtStatus.ACTIVE
    assert derive_debt_status(["PAID", "PAID", "PAID"]) == DebtStatus.FINISHED
    assert derive_debt_status([]) == DebtStatus.ACTIVE


@pytest.mark.parametrize("total", [Decimal("100.005"), "10.001", 0.125])
def test_generate_installments_rejects_sub_cent_total(total):
    """Test totals finer than a cent are rejected instead of rounded"""
    with pytest.raises(InvalidSplitError):
        generate_installments("D14", total, 3, date(2024, 1, 1), Frequency.MONTHLY)


@pytest.mark.parametrize(
    "start_date,count,frequency",
    [
        (date(9990, 1, 1), 20, Frequency.YEARLY),
        (date(9999, 6, 1), 12, Frequency.MONTHLY),
        (date(9999, 12, 1), 5, Frequency.WEEKLY),
    ],
)
def test_generate_installments_rejects_schedule_past_calendar_end(start_date, count, frequency):
    with pytest.raises(InvalidSplitError):
        generate_installments("D15", Decimal("100.00"), count, start_date, frequency)


def test_generate_installments_last_due_date_at_calendar_end():
    installments = generate_installments("D16", Decimal("100.00"), 10, date(9990, 12, 31), Frequency.YEARLY)

    assert installments[-1].due_date == date(9999, 12, 31)
