"""Data transfer objects for recurring transactions."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Frequency, TransactionType

RECURRING_TYPES = (TransactionType.INCOME, TransactionType.EXPENSE)


@dataclass(frozen=True)
class CreateRecurringRequest:
    """Input data for scheduling a recurring income or expense."""

    user_id: str
    description: str
    amount: Decimal
    type: TransactionType
    frequency: Frequency
    start_date: datetime
    account_id: UUID
    category_id: Optional[str] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.description or not self.description.strip():
            errors.append("description is required")
        if self.amount is None or self.amount <= 0:
            errors.append("amount must be positive")
        if self.type not in RECURRING_TYPES:
            errors.append("type must be income or expense")

        return errors


@dataclass(frozen=True)
class UpdateRecurringRequest:
    """Fields of a schedule to change; None leaves a field as it is."""

    description: Optional[str] = None
    amount: Optional[Decimal] = None
    frequency: Optional[Frequency] = None
    next_due_date: Optional[datetime] = None
    category_id: Optional[str] = None

    def validate(self) -> List[str]:
        errors = []

        if self.description is not None and not self.description.strip():
            errors.append("description cannot be empty")
        if self.amount is not None and self.amount <= 0:
            errors.append("amount must be positive")

        return errors


@dataclass(frozen=True)
class RecurringResponse:
    """Response data for a recurring schedule."""

    recurring_id: str
    user_id: str
    account_id: str
    description: str
    amount: Decimal
    type: str
    frequency: str
    next_due_date: datetime
    category_id: Optional[str]
    is_active: bool
    last_run: Optional[datetime]

    @classmethod
    def from_entity(cls, recurring) -> "RecurringResponse":
        return cls(
            recurring_id=str(recurring.id),
            user_id=recurring.user_id,
            account_id=str(recurring.account_id),
            description=recurring.description,
            amount=recurring.amount,
            type=recurring.type.value,
            frequency=recurring.frequency.value,
            next_due_date=recurring.next_due_date,
            category_id=recurring.category_id,
            is_active=recurring.is_active,
            last_run=recurring.last_run,
        )


@dataclass(frozen=True)
class RecurringRunResult:
    """Outcome of one run of the recurring transaction processor."""

    processed: int
    posted: int
    failed: int = 0
