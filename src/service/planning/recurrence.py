"""
Recurring schedule arithmetic.

Monthly and yearly steps clamp to the end of shorter months. The
semi-monthly schedule alternates between the 15th and the last day of
the month.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Collection, List

from dateutil.relativedelta import relativedelta

from src.domain.entities import Frequency
from src.service.billing.dates import days_in_month, shift_month

from .periods import PlanningPeriod

MAX_PROJECTED_OCCURRENCES = 10

_FIXED_STEPS = {
    Frequency.DAILY: timedelta(days=1),
    Frequency.WEEKLY: timedelta(days=7),
    Frequency.BIWEEKLY: timedelta(days=14),
}


@dataclass(frozen=True)
class Occurrence:
    due_date: datetime
    is_overdue: bool


def next_occurrence(current: datetime, frequency: Frequency) -> datetime:
    """The occurrence that follows ``current`` on a schedule."""
    if frequency in _FIXED_STEPS:
        return current + _FIXED_STEPS[frequency]
    if frequency == Frequency.MONTHLY:
        return current + relativedelta(months=1)
    if frequency == Frequency.YEARLY:
        return current + relativedelta(years=1)

    if current.day < 15:
        return current.replace(day=15)
    if current.day == 15:
        return current.replace(day=days_in_month(current.year, current.month))
    year, month = shift_month(current.year, current.month, 1)
    return current.replace(year=year, month=month, day=15)


def project_occurrences(
    next_due: datetime,
    frequency: Frequency,
    period: PlanningPeriod,
    today: datetime,
    settled_days: Collection[date] = (),
    limit: int = MAX_PROJECTED_OCCURRENCES,
) -> List[Occurrence]:
    """
    Occurrences of a schedule still expected inside a period.

    A pending occurrence before ``today`` is reported as overdue even when
    it lies outside the period. Occurrences settled by a transaction on the
    same calendar day are skipped. At most ``limit`` occurrences inside the
    period are returned.

    Args:
        next_due: First occurrence not yet posted
        frequency: Schedule step
        period: Window to project into
        today: Start of the current day
        settled_days: Days on which a linked transaction already exists
    """
    occurrences = []
    due = next_due

    if due < today:
        if due.date() not in settled_days:
            occurrences.append(Occurrence(due_date=due, is_overdue=True))
        due = next_occurrence(due, frequency)

    projected = 0
    while due <= period.end and projected < limit:
        if due >= period.start and due.date() not in settled_days:
            occurrences.append(Occurrence(due_date=due, is_overdue=due < today))
            projected += 1
        due = next_occurrence(due, frequency)
    return occurrences
