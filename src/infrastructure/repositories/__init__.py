"""Repository implementations."""

from .account_repository import PostgresAccountRepository
from .audit_repository import PostgresAuditLogRepository
from .installment_repository import PostgresInstallmentRepository
from .recurring_repository import PostgresRecurringTransactionRepository
from .snapshot_repository import PostgresSnapshotRepository
from .statement_repository import PostgresStatementRepository
from .transaction_repository import PostgresTransactionRepository

__all__ = [
    "PostgresAccountRepository",
    "PostgresAuditLogRepository",
    "PostgresInstallmentRepository",
    "PostgresRecurringTransactionRepository",
    "PostgresSnapshotRepository",
    "PostgresStatementRepository",
    "PostgresTransactionRepository",
]
