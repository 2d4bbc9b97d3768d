"""Data transfer objects for credit-card statements and payments."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class BillingCycleDTO:
    start_date: datetime
    cutoff_date: datetime
    payment_date: datetime
    is_before_cutoff: bool
    days_until_cutoff: int
    days_until_payment: int

    @classmethod
    def from_cycle(cls, cycle) -> "BillingCycleDTO":
        return cls(
            start_date=cycle.cycle_start_date,
            cutoff_date=cycle.cutoff_date,
            payment_date=cycle.payment_date,
            is_before_cutoff=cycle.is_before_cutoff,
            days_until_cutoff=cycle.days_until_cutoff,
            days_until_payment=cycle.days_until_payment,
        )


@dataclass(frozen=True)
class MsiChargeDTO:
    """An installment charge due in the cycle."""

    installment_id: str
    description: str
    amount: Decimal
    current_installment: int
    total_installments: int
    remaining_amount: Decimal
    paid_amount: Decimal
    category_name: str
    category_color: str
    category_icon: str


@dataclass(frozen=True)
class RegularChargeDTO:
    """A regular (non-installment) expense in the cycle."""

    transaction_id: str
    description: str
    amount: Decimal
    date: datetime
    category_name: str
    category_color: str
    category_icon: str


@dataclass(frozen=True)
class PaymentDTO:
    transaction_id: str
    amount: Decimal
    date: datetime
    description: str


@dataclass(frozen=True)
class StatementDetails:
    """Live view of the current, not yet frozen, billing cycle of a card."""

    account_id: str
    account_name: str
    credit_limit: Optional[Decimal]
    current_balance: Decimal
    billing_cycle: BillingCycleDTO
    msi_charges: List[MsiChargeDTO]
    msi_total: Decimal
    regular_charges: List[RegularChargeDTO]
    regular_total: Decimal
    total_due: Decimal
    total_paid: Decimal
    remaining_due: Decimal
    is_fully_paid: bool
    payments: List[PaymentDTO] = field(default_factory=list)

    @property
    def msi_count(self) -> int:
        return len(self.msi_charges)

    @property
    def regular_count(self) -> int:
        return len(self.regular_charges)


@dataclass(frozen=True)
class StatementResponse:
    """A frozen statement."""

    statement_id: str
    account_id: str
    cycle_start: datetime
    cycle_end: datetime
    payment_due_date: datetime
    regular_charges: Decimal
    msi_amount: Decimal
    total_due: Decimal
    minimum_payment: Decimal
    paid_amount: Decimal
    status: str

    @classmethod
    def from_entity(cls, statement) -> "StatementResponse":
        return cls(
            statement_id=str(statement.id),
            account_id=str(statement.account_id),
            cycle_start=statement.cycle_start,
            cycle_end=statement.cycle_end,
            payment_due_date=statement.payment_due_date,
            regular_charges=statement.regular_charges,
            msi_amount=statement.msi_amount,
            total_due=statement.total_due,
            minimum_payment=statement.minimum_payment,
            paid_amount=statement.paid_amount,
            status=statement.status.value,
        )


@dataclass(frozen=True)
class StatementRunResult:
    """Outcome of one run of the statement generator."""

    processed: int
    statements: List[str]
    skipped: int = 0
    failed: int = 0
    overdue: int = 0


@dataclass(frozen=True)
class StatementPaymentResult:
    amount: Decimal
    description: str
    msi_paid: int
    regular_paid: int
    transactions_created: int
    transaction_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class MsiPaymentResult:
    transaction_id: str
    amount: Decimal
    description: str
    installment_number: int
    total_installments: int
    remaining_amount: Decimal


@dataclass(frozen=True)
class RevertResult:
    transaction_id: str
    amount_reverted: Decimal
