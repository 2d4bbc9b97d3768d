"""Transaction entity representing a ledger movement."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class TransactionType(str, Enum):
    """Type of ledger movement."""

    INCOME = "income"  # Money into the account, a payment on a card
    EXPENSE = "expense"  # Money out of the account, a charge on a card
    TRANSFER = "transfer"  # Money from one account to another


@dataclass
class Transaction:
    """
    A posted ledger movement.

    Attributes:
        amount: Always positive; the type decides the direction
        account_id: Source account (the only account for income/expense)
        destination_account_id: Target account, transfers only
        installment_purchase_id: Installment plan this movement belongs to
        recurring_transaction_id: Recurring schedule this movement settles
        statement_id: Statement the movement was billed on or paid against
        affects_balance: False for installment charges, which only record
            that a monthly payment came due
        deleted_at: Set when the movement was reversed
    """

    user_id: str
    amount: Decimal
    description: str
    date: datetime
    type: TransactionType
    account_id: UUID
    destination_account_id: Optional[UUID] = None
    category_id: Optional[str] = None
    installment_purchase_id: Optional[UUID] = None
    recurring_transaction_id: Optional[UUID] = None
    statement_id: Optional[UUID] = None
    affects_balance: bool = True
    deleted_at: Optional[datetime] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_transfer(self) -> bool:
        return self.type == TransactionType.TRANSFER

    @property
    def is_payment(self) -> bool:
        """Incomes and transfers can settle debt; expenses cannot."""
        return self.type in (TransactionType.INCOME, TransactionType.TRANSFER)

    @property
    def target_account_id(self) -> UUID:
        """Account a payment lands on: the destination of a transfer, else the account."""
        return self.destination_account_id if self.is_transfer else self.account_id

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
