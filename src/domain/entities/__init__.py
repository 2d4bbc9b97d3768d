"""Domain Entities - Core business objects."""

from .account import Account, AccountType
from .audit import AuditAction, AuditLogEntry
from .category import UNCATEGORIZED, CategoryInfo
from .installment import InstallmentPurchase
from .recurring import Frequency, RecurringTransaction
from .snapshot import AccountSnapshot
from .statement import CreditCardStatement, StatementStatus
from .transaction import Transaction, TransactionType

__all__ = [
    "Account",
    "AccountType",
    "AuditAction",
    "AuditLogEntry",
    "CategoryInfo",
    "UNCATEGORIZED",
    "InstallmentPurchase",
    "Frequency",
    "RecurringTransaction",
    "AccountSnapshot",
    "CreditCardStatement",
    "StatementStatus",
    "Transaction",
    "TransactionType",
]
