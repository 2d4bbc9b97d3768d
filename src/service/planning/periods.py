"""
Planning periods.

A planning view covers the current half of the month (1st to 15th, 16th
to month end), the whole current month, or the seven days starting today.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import List

from src.service.billing.dates import NOON, at_day, days_in_month, end_of_day, shift_month, start_of_day


class PeriodType(str, Enum):
    """Length of a planning view."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class PlanningPeriod:
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def planning_period(period_type: PeriodType, now: datetime) -> PlanningPeriod:
    """
    Compute the period of ``period_type`` that contains ``now``.

    Example:
        BIWEEKLY on June 20 -> June 16 00:00 .. June 30 23:59:59.999
    """
    if period_type == PeriodType.WEEKLY:
        return PlanningPeriod(start_of_day(now), end_of_day(now + timedelta(days=6)))

    last_day = days_in_month(now.year, now.month)
    if period_type == PeriodType.MONTHLY:
        first, last = 1, last_day
    elif now.day <= 15:
        first, last = 1, 15
    else:
        first, last = 16, last_day

    return PlanningPeriod(
        start=at_day(now.year, now.month, first),
        end=end_of_day(at_day(now.year, now.month, last)),
    )


def upcoming_window(days: int, now: datetime) -> PlanningPeriod:
    """From the start of today to the end of the day ``days`` ahead."""
    return PlanningPeriod(start_of_day(now), end_of_day(now + timedelta(days=days)))


def payment_dates_between(payment_day: int, period: PlanningPeriod) -> List[datetime]:
    """Card payment instants (noon on the clamped payment day) inside the period."""
    dates = []
    year, month = period.start.year, period.start.month
    while (year, month) <= (period.end.year, period.end.month):
        candidate = at_day(year, month, payment_day, NOON)
        if period.contains(candidate):
            dates.append(candidate)
        year, month = shift_month(year, month, 1)
    return dates
