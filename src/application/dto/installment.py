"""Data transfer objects for installment (MSI) purchases."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID


@dataclass(frozen=True)
class CreateInstallmentRequest:
    """Input data for registering a purchase paid in monthly installments."""

    user_id: str
    description: str
    total_amount: Decimal
    installments: int
    purchase_date: datetime
    account_id: UUID
    category_id: Optional[str] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.description or not self.description.strip():
            errors.append("description is required")
        if self.total_amount is None or self.total_amount <= 0:
            errors.append("total_amount must be positive")
        if self.installments is None or self.installments < 1:
            errors.append("installments must be at least 1")

        return errors


@dataclass(frozen=True)
class InstallmentResponse:
    """Response data for an installment purchase with its progress."""

    installment_id: str
    user_id: str
    account_id: str
    description: str
    total_amount: Decimal
    installments: int
    monthly_payment: Decimal
    purchase_date: datetime
    category_id: Optional[str]
    paid_installments: int
    paid_amount: Decimal
    remaining_amount: Decimal
    billed_installments: int
    is_paid_off: bool

    @classmethod
    def from_entity(cls, installment, epsilon: Decimal) -> "InstallmentResponse":
        return cls(
            installment_id=str(installment.id),
            user_id=installment.user_id,
            account_id=str(installment.account_id),
            description=installment.description,
            total_amount=installment.total_amount,
            installments=installment.installments,
            monthly_payment=installment.monthly_payment,
            purchase_date=installment.purchase_date,
            category_id=installment.category_id,
            paid_installments=installment.paid_installments,
            paid_amount=installment.paid_amount,
            remaining_amount=max(Decimal("0.00"), installment.remaining_amount),
            billed_installments=installment.billed_installments,
            is_paid_off=installment.is_settled(epsilon),
        )


@dataclass(frozen=True)
class InstallmentRunResult:
    """Outcome of one run of the installment tracker."""

    users: int
    charges_created: int
    failed: int = 0
