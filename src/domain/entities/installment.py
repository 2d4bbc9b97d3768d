"""Installment purchase (MSI, months without interest) entity."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4


@dataclass
class InstallmentPurchase:
    """
    A card purchase repaid in equal monthly installments.

    paid_installments and paid_amount track what the user paid back.
    billed_installments tracks how many monthly charges have been recorded
    on the card so far.
    """

    user_id: str
    description: str
    total_amount: Decimal
    installments: int
    monthly_payment: Decimal
    purchase_date: datetime
    account_id: UUID
    category_id: Optional[str] = None
    paid_installments: int = 0
    paid_amount: Decimal = Decimal("0.00")
    billed_installments: int = 0
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def remaining_amount(self) -> Decimal:
        return self.total_amount - self.paid_amount

    @property
    def remaining_installments(self) -> int:
        return max(0, self.installments - self.paid_installments)

    def is_settled(self, epsilon: Decimal) -> bool:
        """True when what is left to pay is within ``epsilon``."""
        return self.remaining_amount <= epsilon
