"""Data transfer objects for ledger postings."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from src.domain.entities import TransactionType


@dataclass(frozen=True)
class PostTransactionRequest:
    """Input data for posting a movement through the ledger."""

    user_id: str
    amount: Decimal
    type: TransactionType
    account_id: UUID
    description: str = ""
    date: Optional[datetime] = None
    destination_account_id: Optional[UUID] = None
    category_id: Optional[str] = None
    installment_purchase_id: Optional[UUID] = None
    recurring_transaction_id: Optional[UUID] = None

    def validate(self) -> List[str]:
        errors = []

        if self.amount is None or self.amount <= 0:
            errors.append("amount must be positive")

        if self.type == TransactionType.TRANSFER:
            if self.destination_account_id is None:
                errors.append("destination_account_id is required for transfers")
            elif self.destination_account_id == self.account_id:
                errors.append("destination account must differ from source account")

        return errors


@dataclass(frozen=True)
class TransactionResponse:
    """Response data for a posted movement."""

    transaction_id: str
    user_id: str
    amount: Decimal
    description: str
    date: datetime
    type: str
    account_id: str
    destination_account_id: Optional[str]
    category_id: Optional[str]
    installment_purchase_id: Optional[str]
    recurring_transaction_id: Optional[str]
    statement_id: Optional[str]
    affects_balance: bool

    @classmethod
    def from_entity(cls, transaction) -> "TransactionResponse":
        def _str(value):
            return str(value) if value else None

        return cls(
            transaction_id=str(transaction.id),
            user_id=transaction.user_id,
            amount=transaction.amount,
            description=transaction.description,
            date=transaction.date,
            type=transaction.type.value,
            account_id=str(transaction.account_id),
            destination_account_id=_str(transaction.destination_account_id),
            category_id=transaction.category_id,
            installment_purchase_id=_str(transaction.installment_purchase_id),
            recurring_transaction_id=_str(transaction.recurring_transaction_id),
            statement_id=_str(transaction.statement_id),
            affects_balance=transaction.affects_balance,
        )
