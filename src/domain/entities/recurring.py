"""Recurring transaction entity: a movement that repeats on a schedule."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from .transaction import TransactionType


class Frequency(str, Enum):
    """How often a recurring transaction comes due."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"  # Every 14 days
    MONTHLY = "monthly"
    YEARLY = "yearly"
    SEMIMONTHLY = "biweekly_15_30"  # The 15th and the last day of each month


@dataclass
class RecurringTransaction:
    """
    A scheduled income or expense on one account.

    Attributes:
        next_due_date: Next occurrence not yet posted
        last_run: When the processor last posted an occurrence
        is_active: False once the user removed it; history keeps the link
    """

    user_id: str
    description: str
    amount: Decimal
    type: TransactionType
    frequency: Frequency
    next_due_date: datetime
    account_id: UUID
    category_id: Optional[str] = None
    is_active: bool = True
    last_run: Optional[datetime] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME
