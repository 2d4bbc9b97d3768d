"""
Credit-card interest projections.

Interest accrues monthly at a twelfth of the annual rate on the balance
carried over. Nothing here is posted to the ledger; the figures are
estimates shown next to a card's debt.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from .money import ZERO, to_money
from .settings import BillingSettings, billing_settings

MINIMUM_COST_HORIZON_MONTHS = 120
AMORTIZATION_HORIZON_MONTHS = 60


@dataclass(frozen=True)
class AmortizationRow:
    """One month of a payoff schedule."""

    month: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


@dataclass(frozen=True)
class MinimumPaymentCost:
    """What paying only the minimum every month adds up to."""

    months: int
    total_paid: Decimal
    total_interest: Decimal
    remaining_balance: Decimal

    @property
    def paid_off(self) -> bool:
        return self.remaining_balance <= ZERO


def monthly_interest(balance: Decimal, annual_rate: Decimal) -> Decimal:
    """Interest one month adds to ``balance``; zero for no debt or no rate."""
    if balance <= 0 or annual_rate <= 0:
        return ZERO
    return to_money(balance * annual_rate / 12)


def projected_payoff_months(
    balance: Decimal,
    annual_rate: Decimal,
    monthly_payment: Decimal,
) -> Optional[int]:
    """
    Months of fixed payments needed to clear ``balance``.

    Returns:
        0 when there is no debt, None when the payment never clears it
        (it does not even cover the monthly interest)
    """
    if balance <= 0:
        return 0
    if monthly_payment <= 0:
        return None
    if annual_rate <= 0:
        return math.ceil(balance / monthly_payment)
    if monthly_payment <= monthly_interest(balance, annual_rate):
        return None

    rate = float(annual_rate) / 12
    months = -math.log(1 - float(balance) * rate / float(monthly_payment)) / math.log(1 + rate)
    return math.ceil(months)


def minimum_payment_cost(
    balance: Decimal,
    annual_rate: Decimal,
    settings: BillingSettings = billing_settings,
    max_months: int = MINIMUM_COST_HORIZON_MONTHS,
) -> MinimumPaymentCost:
    """
    Simulate paying the minimum payment every month.

    The minimum follows the statement rule: the greater of a share of the
    balance and the fixed floor, never more than what is owed. The
    simulation stops after ``max_months``.
    """
    remaining = to_money(balance)
    total_paid = ZERO
    total_interest = ZERO
    months = 0

    while remaining > 0 and months < max_months:
        interest = monthly_interest(remaining, annual_rate)
        minimum = max(remaining * settings.minimum_payment_rate, settings.minimum_payment_floor)
        payment = to_money(min(minimum, remaining + interest))

        remaining = to_money(remaining + interest - payment)
        total_paid += payment
        total_interest += interest
        months += 1

    return MinimumPaymentCost(
        months=months,
        total_paid=to_money(total_paid),
        total_interest=to_money(total_interest),
        remaining_balance=max(remaining, ZERO),
    )


def amortization_table(
    balance: Decimal,
    annual_rate: Decimal,
    monthly_payment: Decimal,
    max_months: int = AMORTIZATION_HORIZON_MONTHS,
) -> List[AmortizationRow]:
    """
    Month-by-month schedule for a fixed payment.

    The last payment is trimmed to what is left. A payment that does not
    cover the interest makes the balance grow; the table then runs to
    ``max_months``.
    """
    rows = []
    remaining = to_money(balance)
    month = 0

    while remaining > 0 and month < max_months:
        month += 1
        interest = monthly_interest(remaining, annual_rate)
        payment = to_money(min(monthly_payment, remaining + interest))
        principal = payment - interest
        remaining = to_money(remaining - principal)
        rows.append(
            AmortizationRow(
                month=month,
                payment=payment,
                principal=principal,
                interest=interest,
                balance=remaining,
            )
        )
    return rows
