"""Calendar date arithmetic.

All helpers work on ``datetime.date`` values and return new dates. Month and
year shifts clamp to the last day of the target month when the original
day-of-month does not exist there (Jan 31 + 1 month -> Feb 28/29).
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Tuple
from dateutil.relativedelta import relativedelta


def as_calendar_date(value: date | datetime | str) -> date:
    """
    Reduce a boundary value to a calendar date.

    Datetimes keep their own wall-clock date (no timezone conversion), and ISO
    strings are read by their leading ``YYYY-MM-DD`` part, so "2024-06-01" and
    "2024-06-01T23:30:00-03:00" both give June 1st.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"Cannot interpret {value!r} as a calendar date")


def add_days(from_date: date, days: int) -> date:
    """Shift by ``days`` (may be negative), rolling over months and years"""
    return from_date + timedelta(days=days)


def add_months(from_date: date, months: int) -> date:
    """Shift the month field, carrying into the year and clamping the day"""
    return from_date + relativedelta(months=months)


def add_years(from_date: date, years: int) -> date:
    """Shift the year field; Feb 29 becomes Feb 28 on non-leap years"""
    return from_date + relativedelta(years=years)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a month (inclusive)"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
