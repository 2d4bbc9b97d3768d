"""Data Transfer Objects for application layer."""

from .account import (
    AccountDeletionResult,
    AccountResponse,
    BalancePoint,
    CreateAccountRequest,
    NetWorthPoint,
    SnapshotRunResult,
)
from .installment import CreateInstallmentRequest, InstallmentResponse, InstallmentRunResult
from .planning import (
    CardInterestProjection,
    CardPaymentDueDTO,
    CommitmentDTO,
    ExpectedItemDTO,
    PeriodSummary,
    UpcomingCommitments,
)
from .recurring import (
    CreateRecurringRequest,
    RecurringResponse,
    RecurringRunResult,
    UpdateRecurringRequest,
)
from .statement import (
    BillingCycleDTO,
    MsiChargeDTO,
    MsiPaymentResult,
    PaymentDTO,
    RegularChargeDTO,
    RevertResult,
    StatementDetails,
    StatementPaymentResult,
    StatementResponse,
    StatementRunResult,
)
from .transaction import PostTransactionRequest, TransactionResponse

__all__ = [
    "CreateAccountRequest",
    "AccountResponse",
    "AccountDeletionResult",
    "BalancePoint",
    "NetWorthPoint",
    "SnapshotRunResult",
    "PostTransactionRequest",
    "TransactionResponse",
    "CreateInstallmentRequest",
    "InstallmentResponse",
    "InstallmentRunResult",
    "CreateRecurringRequest",
    "UpdateRecurringRequest",
    "RecurringResponse",
    "RecurringRunResult",
    "ExpectedItemDTO",
    "CardPaymentDueDTO",
    "CommitmentDTO",
    "PeriodSummary",
    "UpcomingCommitments",
    "CardInterestProjection",
    "BillingCycleDTO",
    "MsiChargeDTO",
    "RegularChargeDTO",
    "PaymentDTO",
    "StatementDetails",
    "StatementResponse",
    "StatementRunResult",
    "StatementPaymentResult",
    "MsiPaymentResult",
    "RevertResult",
]
