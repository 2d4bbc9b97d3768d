"""Data transfer objects for account operations."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional

from src.domain.entities import AccountType


@dataclass(frozen=True)
class CreateAccountRequest:
    """Input data for opening an account."""

    user_id: str
    name: str
    type: str
    balance: Decimal = Decimal("0")
    credit_limit: Optional[Decimal] = None
    cutoff_day: Optional[int] = None
    payment_day: Optional[int] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.name or not self.name.strip():
            errors.append("name is required")

        try:
            account_type = AccountType.normalize(self.type)
        except ValueError as e:
            errors.append(str(e))
            return errors

        if account_type == AccountType.CREDIT:
            for field_name in ("cutoff_day", "payment_day"):
                value = getattr(self, field_name)
                if value is None:
                    errors.append(f"{field_name} is required for credit accounts")
                elif not 1 <= value <= 31:
                    errors.append(f"{field_name} must be between 1 and 31")
            if self.balance < 0:
                errors.append("credit balance (debt) cannot be negative")

        return errors


@dataclass(frozen=True)
class AccountResponse:
    """Response data for an account."""

    account_id: str
    user_id: str
    name: str
    type: str
    balance: Decimal
    credit_limit: Optional[Decimal]
    available_credit: Optional[Decimal]
    cutoff_day: Optional[int]
    payment_day: Optional[int]
    is_archived: bool

    @classmethod
    def from_entity(cls, account) -> "AccountResponse":
        return cls(
            account_id=str(account.id),
            user_id=account.user_id,
            name=account.name,
            type=account.type.value,
            balance=account.balance,
            credit_limit=account.credit_limit,
            available_credit=account.available_credit,
            cutoff_day=account.cutoff_day,
            payment_day=account.payment_day,
            is_archived=account.is_archived,
        )


@dataclass(frozen=True)
class AccountDeletionResult:
    """Outcome of deleting an account: removed, or archived because it is in use."""

    account_id: str
    deleted: bool
    archived: bool


@dataclass(frozen=True)
class BalancePoint:
    date: date
    balance: Decimal


@dataclass(frozen=True)
class NetWorthPoint:
    date: date
    assets: Decimal
    liabilities: Decimal
    net_worth: Decimal


@dataclass(frozen=True)
class SnapshotRunResult:
    """Counters returned by the daily snapshot job."""

    created: int
    skipped: int
    errors: int
