"""
Billing cycle calculator.

A credit card is configured with a cutoff day and a payment day. The cycle
that matters at any moment is the one whose payment is coming next: its
cutoff is the last instant charges are attributed to it, and it starts the
day after the previous month's cutoff.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from .dates import END_OF_DAY, NOON, at_day, ceil_days, shift_month, start_of_day


@dataclass(frozen=True)
class BillingCycle:
    """Boundaries of one credit-card billing cycle relative to a reference instant."""

    cycle_start_date: datetime
    cutoff_date: datetime
    payment_date: datetime
    is_before_cutoff: bool
    days_until_cutoff: int
    days_until_payment: int


def validate_cycle_days(cutoff_day: int, payment_day: int) -> None:
    for name, value in (("cutoff_day", cutoff_day), ("payment_day", payment_day)):
        if value is None or not 1 <= value <= 31:
            raise ValueError(f"{name} must be between 1 and 31, got {value!r}")


def get_billing_cycle(
    cutoff_day: int,
    payment_day: int,
    reference: datetime | None = None,
) -> BillingCycle:
    """
    Compute the billing cycle whose payment is next after ``reference``.

    Args:
        cutoff_day: Day of month the card cuts (1-31, clamped in short months)
        payment_day: Day of month payment is due (1-31, clamped in short months)
        reference: Instant to evaluate at, defaults to now (local time)

    Returns:
        BillingCycle with start, cutoff and payment instants and day counts

    Example:
        cutoff_day=20, payment_day=5, reference=June 10
        -> cycle May 21 00:00 .. June 20 23:59:59.999, payment July 5 12:00
    """
    validate_cycle_days(cutoff_day, payment_day)
    now = reference or datetime.now()

    pay_year, pay_month = now.year, now.month
    if now.day > payment_day:
        pay_year, pay_month = shift_month(pay_year, pay_month, 1)
    payment_date = at_day(pay_year, pay_month, payment_day, NOON)

    cut_year, cut_month = pay_year, pay_month
    if payment_day < cutoff_day:
        cut_year, cut_month = shift_month(cut_year, cut_month, -1)
    cutoff_date = at_day(cut_year, cut_month, cutoff_day, END_OF_DAY)

    # Equal days, or clamping in a short month, can put the cutoff on or
    # after the payment; the cutoff then belongs to the previous month.
    if cutoff_date >= payment_date:
        cut_year, cut_month = shift_month(cut_year, cut_month, -1)
        cutoff_date = at_day(cut_year, cut_month, cutoff_day, END_OF_DAY)

    prev_year, prev_month = shift_month(cut_year, cut_month, -1)
    prev_cutoff_date = at_day(prev_year, prev_month, cutoff_day, END_OF_DAY)
    cycle_start_date = start_of_day(prev_cutoff_date + timedelta(days=1))

    return BillingCycle(
        cycle_start_date=cycle_start_date,
        cutoff_date=cutoff_date,
        payment_date=payment_date,
        is_before_cutoff=now <= cutoff_date,
        days_until_cutoff=ceil_days(cutoff_date - now),
        days_until_payment=ceil_days(payment_date - now),
    )
