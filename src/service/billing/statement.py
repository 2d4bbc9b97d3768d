"""Statement window, totals and status rules."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from src.domain.entities import InstallmentPurchase, StatementStatus

from .dates import at_day, end_of_day, shift_month, start_of_day
from .money import ZERO, to_money
from .settings import BillingSettings, billing_settings


@dataclass(frozen=True)
class StatementWindow:
    """Dates frozen into a statement generated on a cutoff day."""

    cycle_start: datetime
    cycle_end: datetime
    payment_due_date: datetime

    @property
    def charges_until(self) -> datetime:
        """Last instant of the cutoff day; charges up to it are billed."""
        return end_of_day(self.cycle_end)


def statement_window(
    cutoff_day: int,
    payment_day: Optional[int],
    today: date | datetime,
    settings: BillingSettings = billing_settings,
) -> StatementWindow:
    """
    Compute the cycle closed by a cutoff that happens on ``today``.

    Args:
        cutoff_day: Configured cutoff day of the card
        payment_day: Configured payment day, None falls back to an offset
        today: The cutoff day being processed

    Returns:
        StatementWindow with cycle start, cycle end and payment due date
    """
    cycle_end = start_of_day(today)

    prev_year, prev_month = shift_month(cycle_end.year, cycle_end.month, -1)
    prev_cutoff = at_day(prev_year, prev_month, cutoff_day)
    cycle_start = prev_cutoff + timedelta(days=1)

    if payment_day:
        due = at_day(cycle_end.year, cycle_end.month, payment_day)
        if due <= cycle_end:
            next_year, next_month = shift_month(cycle_end.year, cycle_end.month, 1)
            due = at_day(next_year, next_month, payment_day)
    else:
        due = cycle_end + timedelta(days=settings.default_payment_offset_days)

    return StatementWindow(
        cycle_start=cycle_start,
        cycle_end=cycle_end,
        payment_due_date=due,
    )


def flat_msi_amount(purchases: Iterable[InstallmentPurchase]) -> Decimal:
    """One monthly payment per plan that still has installments to go."""
    total = ZERO
    for purchase in purchases:
        if purchase.remaining_installments > 0:
            total += purchase.monthly_payment
    return to_money(total)


def minimum_payment(
    total_due: Decimal,
    settings: BillingSettings = billing_settings,
) -> Decimal:
    """Greater of a share of the total due and the fixed floor."""
    return to_money(max(total_due * settings.minimum_payment_rate, settings.minimum_payment_floor))


def statement_status(
    total_due: Decimal,
    paid_amount: Decimal,
    payment_due_date: datetime,
    today: date | datetime,
    settings: BillingSettings = billing_settings,
) -> StatementStatus:
    """Derive the status of a statement from what has been paid against it."""
    if paid_amount > 0 and paid_amount >= total_due - settings.fully_paid_tolerance:
        return StatementStatus.PAID
    if start_of_day(today) > start_of_day(payment_due_date):
        return StatementStatus.OVERDUE
    if paid_amount > 0:
        return StatementStatus.PARTIAL
    return StatementStatus.PENDING
