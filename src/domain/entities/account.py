"""Account entity: a cash box, a debit account or a credit card."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class AccountType(str, Enum):
    """Kind of account, which decides the sign convention of its balance."""

    CASH = "CASH"  # balance is money held
    DEBIT = "DEBIT"  # balance is money held
    CREDIT = "CREDIT"  # balance is debt owed

    @classmethod
    def normalize(cls, value: "str | AccountType") -> "AccountType":
        """
        Map legacy and localized spellings to the canonical type.

        Raises:
            ValueError: If the value matches no known account type
        """
        if isinstance(value, AccountType):
            return value
        key = str(value).strip().lower()
        try:
            return _ACCOUNT_TYPE_ALIASES[key]
        except KeyError:
            raise ValueError(f"Unknown account type: {value!r}") from None


_ACCOUNT_TYPE_ALIASES = {
    "cash": AccountType.CASH,
    "efectivo": AccountType.CASH,
    "debit": AccountType.DEBIT,
    "debito": AccountType.DEBIT,
    "débito": AccountType.DEBIT,
    "tarjeta de débito": AccountType.DEBIT,
    "tarjeta de debito": AccountType.DEBIT,
    "checking": AccountType.DEBIT,
    "savings": AccountType.DEBIT,
    "credit": AccountType.CREDIT,
    "credit card": AccountType.CREDIT,
    "credito": AccountType.CREDIT,
    "crédito": AccountType.CREDIT,
    "tarjeta de crédito": AccountType.CREDIT,
    "tarjeta de credito": AccountType.CREDIT,
}


@dataclass
class Account:
    """
    A user's account.

    For CREDIT accounts the balance is the amount owed and both cutoff_day
    and payment_day are set. For CASH and DEBIT accounts the balance is the
    money available.
    """

    user_id: str
    name: str
    type: AccountType
    balance: Decimal = Decimal("0.00")
    credit_limit: Optional[Decimal] = None
    cutoff_day: Optional[int] = None
    payment_day: Optional[int] = None
    is_archived: bool = False
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_credit(self) -> bool:
        return self.type == AccountType.CREDIT

    @property
    def available_credit(self) -> Optional[Decimal]:
        if not self.is_credit or self.credit_limit is None:
            return None
        return self.credit_limit - self.balance
