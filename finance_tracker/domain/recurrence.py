"""Expansion of recurring revenues and expenses into dated occurrences"""

import uuid
from dataclasses import replace
from datetime import date
from typing import Callable, List, TypeVar
from finance_tracker.domain.exceptions import InvalidRecurrenceError
from finance_tracker.domain.models import Expense, Revenue, Status
from finance_tracker.domain.schedule import advance

Template = TypeVar("Template", Revenue, Expense)


def new_occurrence_id() -> str:
    return str(uuid.uuid4())


def expand_recurrence(
    template: Template,
    repetitions: int,
    id_factory: Callable[[], str] = new_occurrence_id,
) -> List[Template]:
    """
    Expand a revenue/expense template into independent occurrences.

    Occurrence i (0-based) is dated at the template's anchor date advanced by
    i periods of its frequency. Every other field is copied verbatim; each
    occurrence gets a fresh id and starts PENDING. Occurrences keep no link to
    each other or to the template.

    A non-recurrent template, or ``repetitions <= 1``, yields exactly one
    record at the anchor date.

    Raises:
        InvalidRecurrenceError: recurrent template without a frequency, or a
            last occurrence past the calendar's range
    """
    if not template.is_recurrent or repetitions <= 1:
        return [replace(template, id=id_factory(), status=Status.PENDING)]

    if template.frequency is None:
        raise InvalidRecurrenceError("Recurrent template requires a frequency")

    anchor = getattr(template, template.anchor_field)
    try:
        advance(anchor, template.frequency, repetitions - 1)
    except (ValueError, OverflowError) as e:
        raise InvalidRecurrenceError(
            f"{repetitions} occurrences from {anchor} end after {date.max}"
        ) from e

    return [
        replace(
            template,
            id=id_factory(),
            status=Status.PENDING,
            **{template.anchor_field: advance(anchor, template.frequency, i)},
        )
        for i in range(repetitions)
    ]
