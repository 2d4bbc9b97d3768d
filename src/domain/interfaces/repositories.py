"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from src.domain.entities import (
    Account,
    AccountSnapshot,
    AuditLogEntry,
    CreditCardStatement,
    InstallmentPurchase,
    RecurringTransaction,
    Transaction,
)


class AccountRepository(ABC):
    """
    Abstract repository for Account persistence.

    Balances are only changed through ``adjust_balance`` so that the update
    is applied relative to the stored value.
    """

    @abstractmethod
    async def add(self, account: Account) -> Account:
        """
        Persist a new account.

        Args:
            account: The account to save

        Returns:
            The saved account
        """
        ...

    @abstractmethod
    async def get(
        self,
        account_id: UUID,
        user_id: Optional[str] = None,
        for_update: bool = False,
    ) -> Optional[Account]:
        """
        Retrieve an account by ID.

        Args:
            account_id: The account's unique identifier
            user_id: When given, only return the account if the user owns it
            for_update: Lock the row until the unit of work ends

        Returns:
            The account if found, None otherwise
        """
        ...

    @abstractmethod
    async def lock(self, account_ids: Iterable[UUID]) -> Dict[UUID, Account]:
        """
        Lock several account rows and return their current state.

        Rows are locked in ascending id order so that two units of work
        touching the same pair of accounts cannot deadlock.

        Args:
            account_ids: Accounts to lock (duplicates are ignored)

        Returns:
            Mapping of id to account for the rows that exist
        """
        ...

    @abstractmethod
    async def list_by_user(
        self,
        user_id: str,
        include_archived: bool = False,
    ) -> List[Account]:
        ...

    @abstractmethod
    async def list_active(self) -> List[Account]:
        """Retrieve every non-archived account of every user."""
        ...

    @abstractmethod
    async def list_credit_cutting_on(self, today: date) -> List[Account]:
        """
        Retrieve the credit accounts whose cutoff falls on ``today``.

        On the last day of a month this includes cards whose cutoff day does
        not exist in that month (a cutoff of 31 cuts on April 30).
        """
        ...

    @abstractmethod
    async def adjust_balance(self, account_id: UUID, delta: Decimal) -> None:
        """
        Add ``delta`` (possibly negative) to the stored balance.

        Args:
            account_id: The account to change
            delta: Signed amount to add
        """
        ...

    @abstractmethod
    async def update(self, account: Account) -> Account:
        """Persist changes to descriptive fields (name, archive flag, days)."""
        ...

    @abstractmethod
    async def delete(self, account_id: UUID) -> None:
        ...

    @abstractmethod
    async def is_referenced(self, account_id: UUID) -> bool:
        """True when any transaction, plan, statement or recurring schedule points at the account."""
        ...


class TransactionRepository(ABC):
    """Abstract repository for Transaction persistence."""

    @abstractmethod
    async def add(self, transaction: Transaction) -> Transaction:
        ...

    @abstractmethod
    async def get(
        self,
        transaction_id: UUID,
        user_id: Optional[str] = None,
    ) -> Optional[Transaction]:
        """
        Retrieve a transaction by ID, including soft-deleted ones.

        Args:
            transaction_id: The transaction's unique identifier
            user_id: When given, only return the transaction if the user owns it

        Returns:
            The transaction if found, None otherwise
        """
        ...

    @abstractmethod
    async def list_by_user(
        self,
        user_id: str,
        account_id: Optional[UUID] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Transaction]:
        """
        Retrieve non-deleted transactions for a user, newest first.

        Args:
            user_id: The user's identifier
            account_id: Restrict to movements from or to this account
            limit: Maximum number of transactions to return
            offset: Number of transactions to skip
        """
        ...

    @abstractmethod
    async def list_by_installment(self, installment_id: UUID) -> List[Transaction]:
        """Retrieve the non-deleted transactions linked to an installment plan."""
        ...

    @abstractmethod
    async def list_all_by_installment(self, installment_id: UUID) -> List[Transaction]:
        """Retrieve every transaction linked to a plan, soft-deleted ones included."""
        ...

    @abstractmethod
    async def list_by_recurring(self, recurring_id: UUID) -> List[Transaction]:
        """Retrieve the non-deleted transactions that settled a recurring schedule."""
        ...

    @abstractmethod
    async def list_regular_expenses(
        self,
        account_id: UUID,
        start: Optional[datetime],
        end: datetime,
        unbilled_only: bool = False,
    ) -> List[Transaction]:
        """
        Retrieve non-installment, non-deleted expenses dated in [start, end].

        Args:
            account_id: The card the expenses were charged to
            start: First instant of the window, None for no lower bound
            end: Last instant of the window
            unbilled_only: Skip expenses already linked to a statement

        Returns:
            Expenses ordered by date descending
        """
        ...

    @abstractmethod
    async def list_incoming_transfers(
        self,
        account_id: UUID,
        start: datetime,
        end: datetime,
    ) -> List[Transaction]:
        """Retrieve non-deleted transfers into ``account_id`` dated in [start, end]."""
        ...

    @abstractmethod
    async def link_to_statement(
        self,
        transaction_ids: Iterable[UUID],
        statement_id: UUID,
    ) -> int:
        """
        Mark transactions as billed on a statement.

        Returns:
            Number of transactions linked
        """
        ...

    @abstractmethod
    async def update(self, transaction: Transaction) -> Transaction:
        """Persist changes to statement link and deletion marker."""
        ...

    @abstractmethod
    async def delete_many(self, transaction_ids: Iterable[UUID]) -> None:
        """Remove transactions permanently."""
        ...


class InstallmentRepository(ABC):
    """Abstract repository for InstallmentPurchase persistence."""

    @abstractmethod
    async def add(self, installment: InstallmentPurchase) -> InstallmentPurchase:
        ...

    @abstractmethod
    async def get(
        self,
        installment_id: UUID,
        user_id: Optional[str] = None,
        for_update: bool = False,
    ) -> Optional[InstallmentPurchase]:
        """
        Retrieve an installment plan by ID.

        Args:
            installment_id: The plan's unique identifier
            user_id: When given, only return the plan if the user owns it
            for_update: Lock the row until the unit of work ends
        """
        ...

    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[InstallmentPurchase]:
        """Retrieve all plans of a user, newest purchase first."""
        ...

    @abstractmethod
    async def list_by_account(
        self,
        account_id: UUID,
        unpaid_only: bool = True,
    ) -> List[InstallmentPurchase]:
        """
        Retrieve the plans charged to a card.

        Args:
            account_id: The card
            unpaid_only: Only plans whose paid amount is below the total
        """
        ...

    @abstractmethod
    async def list_user_ids_with_open_plans(self) -> List[str]:
        """Retrieve the distinct users owning at least one plan not yet paid off."""
        ...

    @abstractmethod
    async def update(self, installment: InstallmentPurchase) -> InstallmentPurchase:
        """Persist progress fields (paid and billed counters, paid amount)."""
        ...

    @abstractmethod
    async def delete(self, installment_id: UUID) -> None:
        ...


class RecurringTransactionRepository(ABC):
    """Abstract repository for RecurringTransaction persistence."""

    @abstractmethod
    async def add(self, recurring: RecurringTransaction) -> RecurringTransaction:
        ...

    @abstractmethod
    async def get(
        self,
        recurring_id: UUID,
        user_id: Optional[str] = None,
        for_update: bool = False,
    ) -> Optional[RecurringTransaction]:
        """
        Retrieve a recurring transaction by ID, inactive ones included.

        Args:
            recurring_id: The schedule's unique identifier
            user_id: When given, only return it if the user owns it
            for_update: Lock the row until the unit of work ends
        """
        ...

    @abstractmethod
    async def list_by_user(
        self,
        user_id: str,
        active_only: bool = True,
    ) -> List[RecurringTransaction]:
        """Retrieve the schedules of a user, soonest due first."""
        ...

    @abstractmethod
    async def list_due(
        self,
        until: datetime,
        user_id: Optional[str] = None,
    ) -> List[RecurringTransaction]:
        """
        Retrieve active schedules whose next occurrence is at or before ``until``.

        Args:
            until: Last instant considered due
            user_id: Restrict to one user, every user when None
        """
        ...

    @abstractmethod
    async def update(self, recurring: RecurringTransaction) -> RecurringTransaction:
        """Persist schedule fields, progress and the active flag."""
        ...


class StatementRepository(ABC):
    """Abstract repository for CreditCardStatement persistence."""

    @abstractmethod
    async def add(self, statement: CreditCardStatement) -> CreditCardStatement:
        """
        Persist a new statement.

        Raises:
            DuplicateStatementException: If a statement with the same account
                and cycle end already exists
        """
        ...

    @abstractmethod
    async def get(self, statement_id: UUID, for_update: bool = False) -> Optional[CreditCardStatement]:
        ...

    @abstractmethod
    async def get_by_cycle_end(
        self,
        account_id: UUID,
        cycle_end: datetime,
    ) -> Optional[CreditCardStatement]:
        ...

    @abstractmethod
    async def list_by_account(self, account_id: UUID) -> List[CreditCardStatement]:
        """Retrieve the statements of a card, most recent cycle first."""
        ...

    @abstractmethod
    async def list_open(
        self,
        account_id: UUID,
        for_update: bool = False,
    ) -> List[CreditCardStatement]:
        """Retrieve statements not yet fully paid, oldest cycle first."""
        ...

    @abstractmethod
    async def list_past_due(self, today: datetime) -> List[CreditCardStatement]:
        """Retrieve PENDING or PARTIAL statements whose due date is before ``today``."""
        ...

    @abstractmethod
    async def update(self, statement: CreditCardStatement) -> CreditCardStatement:
        """Persist paid amount and status."""
        ...


class AuditLogRepository(ABC):
    """Append-only audit log."""

    @abstractmethod
    async def add(self, entry: AuditLogEntry) -> AuditLogEntry:
        ...


class SnapshotRepository(ABC):
    """Abstract repository for daily balance snapshots."""

    @abstractmethod
    async def get(self, account_id: UUID, day: date) -> Optional[AccountSnapshot]:
        ...

    @abstractmethod
    async def save(self, snapshot: AccountSnapshot) -> AccountSnapshot:
        """Insert the snapshot, or update the balance of the existing one for that day."""
        ...

    @abstractmethod
    async def list_by_account(
        self,
        account_id: UUID,
        since: date,
    ) -> List[AccountSnapshot]:
        """Retrieve snapshots of an account from ``since`` on, oldest first."""
        ...

    @abstractmethod
    async def list_by_user(self, user_id: str, since: date) -> List[AccountSnapshot]:
        """Retrieve snapshots of every account of a user from ``since`` on, oldest first."""
        ...
