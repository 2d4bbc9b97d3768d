"""Credit-card statement entity."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4


class StatementStatus(str, Enum):
    PENDING = "PENDING"
    PARTIAL = "PARTIAL"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


@dataclass
class CreditCardStatement:
    """
    Snapshot of a closed billing cycle.

    Created once per account and cycle end on the cutoff day. Amounts are
    frozen at generation time; only paid_amount and status change later.
    """

    account_id: UUID
    cycle_start: datetime
    cycle_end: datetime
    payment_due_date: datetime
    regular_charges: Decimal
    msi_amount: Decimal
    total_due: Decimal
    minimum_payment: Decimal
    paid_amount: Decimal = Decimal("0.00")
    status: StatementStatus = StatementStatus.PENDING
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def outstanding(self) -> Decimal:
        return max(Decimal("0.00"), self.total_due - self.paid_amount)

    @property
    def is_open(self) -> bool:
        return self.status != StatementStatus.PAID
