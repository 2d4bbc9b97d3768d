"""Application services - use case orchestration."""

from .account_service import AccountService
from .installment_service import InstallmentService
from .payment_service import PaymentService
from .planning_service import PlanningService
from .posting_engine import PostingEngine
from .recurring_service import RecurringService
from .snapshot_service import SnapshotService
from .statement_service import StatementService
from .transaction_service import TransactionService

__all__ = [
    "AccountService",
    "InstallmentService",
    "PaymentService",
    "PlanningService",
    "PostingEngine",
    "RecurringService",
    "SnapshotService",
    "StatementService",
    "TransactionService",
]
