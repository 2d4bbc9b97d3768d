"""Unit of work: one atomic storage transaction with its repositories."""

from abc import ABC, abstractmethod
from typing import Callable

from .repositories import (
    AccountRepository,
    AuditLogRepository,
    InstallmentRepository,
    RecurringTransactionRepository,
    SnapshotRepository,
    StatementRepository,
    TransactionRepository,
)


class UnitOfWork(ABC):
    """
    Abstract unit of work.

    Used as an async context manager: leaving the block normally commits,
    leaving it with an exception rolls everything back.

    Usage:
        async with uow_factory() as uow:
            account = await uow.accounts.get(account_id, for_update=True)
            await uow.accounts.adjust_balance(account.id, Decimal("10"))
    """

    accounts: AccountRepository
    transactions: TransactionRepository
    installments: InstallmentRepository
    recurring: RecurringTransactionRepository
    statements: StatementRepository
    audit_logs: AuditLogRepository
    snapshots: SnapshotRepository

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...


UnitOfWorkFactory = Callable[[], UnitOfWork]
