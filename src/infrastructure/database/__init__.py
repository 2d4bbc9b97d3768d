"""Database infrastructure."""

from .connection import DatabaseSessionManager, db_manager
from .models import (
    AccountModel,
    AccountSnapshotModel,
    AuditLogModel,
    Base,
    CreditCardStatementModel,
    InstallmentPurchaseModel,
    TransactionModel,
)

__all__ = [
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "AccountModel",
    "AccountSnapshotModel",
    "AuditLogModel",
    "CreditCardStatementModel",
    "InstallmentPurchaseModel",
    "TransactionModel",
]
