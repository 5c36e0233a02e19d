"""Frequency to calendar arithmetic mapping shared by installments and recurrences"""

from datetime import date
from finance_tracker.domain.models import Frequency
from finance_tracker.utils.date_utils import add_days, add_months, add_years

WEEK_DAYS = 7
BIWEEK_DAYS = 15  # Fortnight as 15 calendar days, not 14


def advance(start: date, frequency: Frequency, periods: int) -> date:
    """
    Advance ``start`` by ``periods`` whole periods of ``frequency``.

    Always computed from the anchor date, never chained from a previous result,
    so month-end clamping on one period does not leak into the next
    (Jan 31 monthly -> Feb 29, Mar 31, Apr 30).
    """
    if periods == 0:
        return start

    if frequency == Frequency.DAILY:
        return add_days(start, periods)
    if frequency == Frequency.WEEKLY:
        return add_days(start, periods * WEEK_DAYS)
    if frequency == Frequency.BIWEEKLY:
        return add_days(start, periods * BIWEEK_DAYS)
    if frequency == Frequency.MONTHLY:
        return add_months(start, periods)
    if frequency == Frequency.YEARLY:
        return add_years(start, periods)

    raise ValueError(f"Unsupported frequency: {frequency!r}")
