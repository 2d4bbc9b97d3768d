"""Data transfer objects for cash-flow planning and card interest projections."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from src.service.billing import AmortizationRow, MinimumPaymentCost


@dataclass(frozen=True)
class ExpectedItemDTO:
    """One projected occurrence of a recurring income or expense."""

    recurring_id: str
    description: str
    amount: Decimal
    due_date: datetime
    account_id: str
    category_id: Optional[str]
    is_overdue: bool


@dataclass(frozen=True)
class CardPaymentDueDTO:
    """
    Part of a card payment falling due in the period.

    Either one installment plan's monthly payment (``installment_id`` set)
    or the regular charges of the cycle not yet paid.
    """

    account_id: str
    account_name: str
    description: str
    amount: Decimal
    due_date: datetime
    is_msi: bool
    installment_id: Optional[str] = None
    total_amount: Optional[Decimal] = None
    paid_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class PeriodSummary:
    """Cash position against everything expected in a planning period."""

    period_type: str
    period_start: datetime
    period_end: datetime
    current_balance: Decimal
    current_debt: Decimal
    current_msi_debt: Decimal
    expected_income: List[ExpectedItemDTO]
    expected_expenses: List[ExpectedItemDTO]
    card_payments_due: List[CardPaymentDueDTO]
    total_expected_income: Decimal
    total_commitments: Decimal
    disposable_income: Decimal
    is_sufficient: bool
    shortfall: Decimal
    warnings: List[str]


@dataclass(frozen=True)
class CommitmentDTO:
    """A payment the user is committed to, from a schedule or a card."""

    kind: str  # recurring, card_payment
    description: str
    amount: Decimal
    due_date: datetime
    account_id: str
    is_overdue: bool = False


@dataclass(frozen=True)
class UpcomingCommitments:
    window_start: datetime
    window_end: datetime
    commitments: List[CommitmentDTO]
    total: Decimal


@dataclass(frozen=True)
class CardInterestProjection:
    """Interest and payoff estimates for a card's current debt."""

    account_id: str
    balance: Decimal
    annual_rate: Decimal
    monthly_interest: Decimal
    minimum_payment: Decimal
    monthly_payment: Decimal
    payoff_months: Optional[int]
    minimum_only: MinimumPaymentCost
    amortization: List[AmortizationRow]
