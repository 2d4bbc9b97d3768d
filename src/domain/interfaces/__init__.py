"""
Domain Interfaces (Ports)
"""

from .clients import CategoryLookupClient
from .repositories import (
    AccountRepository,
    AuditLogRepository,
    InstallmentRepository,
    RecurringTransactionRepository,
    SnapshotRepository,
    StatementRepository,
    TransactionRepository,
)
from .unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "AccountRepository",
    "TransactionRepository",
    "InstallmentRepository",
    "RecurringTransactionRepository",
    "StatementRepository",
    "AuditLogRepository",
    "SnapshotRepository",
    "UnitOfWork",
    "UnitOfWorkFactory",
    "CategoryLookupClient",
]
