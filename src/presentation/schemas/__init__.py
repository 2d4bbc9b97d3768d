"""Pydantic schemas for API request/response validation."""

from .account import (
    AccountDeletionSchema,
    AccountSchema,
    BalancePointSchema,
    CreateAccountSchema,
    NetWorthPointSchema,
)
from .error import ErrorResponseSchema
from .installment import (
    CreateInstallmentSchema,
    InstallmentSchema,
    PayInstallmentSchema,
    ProcessInstallmentsSchema,
)
from .planning import (
    AmortizationRowSchema,
    CardInterestSchema,
    CardPaymentDueSchema,
    CommitmentSchema,
    ExpectedItemSchema,
    MinimumPaymentCostSchema,
    PeriodSummarySchema,
    UpcomingCommitmentsSchema,
)
from .recurring import (
    CreateRecurringSchema,
    RecurringRunSchema,
    RecurringSchema,
    UpdateRecurringSchema,
)
from .statement import (
    MsiPaymentSchema,
    PaymentRequestSchema,
    RevertSchema,
    StatementDetailsSchema,
    StatementPaymentSchema,
    StatementSchema,
)
from .transaction import PostTransactionSchema, TransactionSchema

__all__ = [
    "CreateAccountSchema",
    "AccountSchema",
    "AccountDeletionSchema",
    "BalancePointSchema",
    "NetWorthPointSchema",
    "PostTransactionSchema",
    "TransactionSchema",
    "CreateInstallmentSchema",
    "PayInstallmentSchema",
    "InstallmentSchema",
    "ProcessInstallmentsSchema",
    "PaymentRequestSchema",
    "StatementDetailsSchema",
    "StatementSchema",
    "StatementPaymentSchema",
    "MsiPaymentSchema",
    "RevertSchema",
    "CreateRecurringSchema",
    "UpdateRecurringSchema",
    "RecurringSchema",
    "RecurringRunSchema",
    "PeriodSummarySchema",
    "ExpectedItemSchema",
    "CardPaymentDueSchema",
    "UpcomingCommitmentsSchema",
    "CommitmentSchema",
    "CardInterestSchema",
    "AmortizationRowSchema",
    "MinimumPaymentCostSchema",
    "ErrorResponseSchema",
]
