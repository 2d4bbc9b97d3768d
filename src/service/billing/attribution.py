"""
Installment (MSI) attribution.

An installment purchase produces one charge per month on the day of month it
was bought. A cycle spans roughly one month, so the charge can only land on
that day in the month the cycle starts or in the month of its cutoff.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from src.domain.entities import InstallmentPurchase, Transaction

from .dates import NOON, at_day, months_between
from .money import to_money


@dataclass(frozen=True)
class InstallmentCharge:
    """One installment purchase charge that is due inside a billing cycle."""

    purchase_id: UUID
    description: str
    amount: Decimal
    installment_number: int
    total_installments: int
    remaining_amount: Decimal
    paid_amount: Decimal
    charge_date: datetime
    category_id: Optional[str] = None


def charge_date_in_cycle(
    purchase_date: datetime,
    cycle_start: datetime,
    cutoff: datetime,
) -> Optional[datetime]:
    """
    Find the charge of a purchase that falls inside [cycle_start, cutoff].

    A charge can never precede the purchase itself. Returns None when no
    charge lands in the cycle.
    """
    charge_day = purchase_date.day
    candidates = (
        at_day(cycle_start.year, cycle_start.month, charge_day, NOON),
        at_day(cutoff.year, cutoff.month, charge_day, NOON),
    )
    for candidate in candidates:
        if cycle_start <= candidate <= cutoff and candidate >= purchase_date:
            return candidate
    return None


def attribute_installments(
    purchases: Iterable[InstallmentPurchase],
    cycle_start: datetime,
    cutoff: datetime,
) -> List[InstallmentCharge]:
    """
    Select the purchases charging inside the cycle and number each charge.

    Purchases already paid in full are ignored. The installment number is
    the count of calendar months since purchase plus one, capped at the plan
    length.
    """
    charges = []
    for purchase in purchases:
        if purchase.paid_amount >= purchase.total_amount:
            continue

        charge_date = charge_date_in_cycle(purchase.purchase_date, cycle_start, cutoff)
        if charge_date is None:
            continue

        installment_number = min(
            months_between(charge_date, purchase.purchase_date) + 1,
            purchase.installments,
        )
        charges.append(
            InstallmentCharge(
                purchase_id=purchase.id,
                description=purchase.description,
                amount=to_money(purchase.monthly_payment),
                installment_number=installment_number,
                total_installments=purchase.installments,
                remaining_amount=to_money(purchase.total_amount - purchase.paid_amount),
                paid_amount=to_money(purchase.paid_amount),
                charge_date=charge_date,
                category_id=purchase.category_id,
            )
        )
    return charges


def is_paid_in_month(payments: Iterable[Transaction], due_date: datetime) -> bool:
    """
    Check whether any payment lands in the calendar month of ``due_date``.

    Only incomes and transfers count. Expenses linked to a plan are the
    purchase and its charges, not payments.
    """
    return any(
        tx.is_payment
        and not tx.is_deleted
        and tx.date.year == due_date.year
        and tx.date.month == due_date.month
        for tx in payments
    )
