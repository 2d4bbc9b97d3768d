"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .ledger import (
    AlreadySettledException,
    DuplicateStatementException,
    InstallmentAlreadyPaidException,
    InsufficientFundsException,
    NoBalanceDueException,
    OverpaymentRejectedException,
    RevertNotAllowedException,
)
from .not_found import (
    AccountNotFoundException,
    InstallmentNotFoundException,
    NotFoundException,
    RecurringTransactionNotFoundException,
    StatementNotFoundException,
    TransactionNotFoundException,
)
from .validation import ValidationException

__all__ = [
    "DomainException",
    "ValidationException",
    "NotFoundException",
    "AccountNotFoundException",
    "TransactionNotFoundException",
    "InstallmentNotFoundException",
    "RecurringTransactionNotFoundException",
    "StatementNotFoundException",
    "InsufficientFundsException",
    "OverpaymentRejectedException",
    "AlreadySettledException",
    "InstallmentAlreadyPaidException",
    "NoBalanceDueException",
    "RevertNotAllowedException",
    "DuplicateStatementException",
]
