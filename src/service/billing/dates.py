"""
Calendar arithmetic for billing cycles.

Every month shift in this package clamps the day of month to the last day
of the target month: day 31 in April is April 30, day 30 in February is
February 28 (29 on leap years). Dates never roll over into the next month.
"""

import calendar
import math
from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta

END_OF_DAY = time(23, 59, 59, 999000)
NOON = time(12, 0, 0)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def shift_month(year: int, month: int, months: int) -> tuple[int, int]:
    """Move (year, month) by ``months`` calendar months."""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, clamping ``day`` into the month."""
    return date(year, month, max(1, min(day, days_in_month(year, month))))


def at_day(year: int, month: int, day: int, at: time = time.min) -> datetime:
    """Datetime on (year, month, clamped day) at the given time of day."""
    return datetime.combine(clamp_day(year, month, day), at)


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping to the end of shorter months."""
    return value + relativedelta(months=months)


def months_between(later: date | datetime, earlier: date | datetime) -> int:
    """
    Number of calendar-month boundaries between two dates.

    Only year and month are compared: Jan 31 and Feb 1 are one month apart.
    """
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def start_of_day(value: datetime | date) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.min)


def end_of_day(value: datetime | date) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, END_OF_DAY)


def is_last_day_of_month(value: date | datetime) -> bool:
    return value.day == days_in_month(value.year, value.month)


def ceil_days(delta: timedelta) -> int:
    """Whole days needed to cover ``delta``, rounding up (negative when past)."""
    return math.ceil(delta.total_seconds() / 86400)
