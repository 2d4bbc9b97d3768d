"""Ledger rule violations raised while posting or paying."""

from decimal import Decimal

from .base import DomainException


class InsufficientFundsException(DomainException):
    """Raised when a cash or debit account cannot cover an outflow."""

    def __init__(self, account_name: str, available: Decimal, required: Decimal):
        super().__init__(
            message=(
                f"Insufficient funds in {account_name}: "
                f"available {available}, required {required}"
            ),
            code="INSUFFICIENT_FUNDS",
        )
        self.available = available
        self.required = required


class OverpaymentRejectedException(DomainException):
    """Raised when a payment exceeds what is owed."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="OVERPAYMENT_REJECTED",
        )


class AlreadySettledException(DomainException):
    """Raised when there is nothing left to pay."""

    def __init__(self, message: str, code: str = "ALREADY_SETTLED"):
        super().__init__(message=message, code=code)


class InstallmentAlreadyPaidException(AlreadySettledException):
    def __init__(self, installment_id: str):
        super().__init__(
            message=f"Installment purchase already paid: {installment_id}",
            code="INSTALLMENT_ALREADY_PAID",
        )
        self.installment_id = installment_id


class NoBalanceDueException(AlreadySettledException):
    def __init__(self, account_id: str):
        super().__init__(
            message=f"No balance due for account: {account_id}",
            code="NO_BALANCE_DUE",
        )
        self.account_id = account_id


class RevertNotAllowedException(DomainException):
    """Raised when a transaction is not a revertible card payment."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="REVERT_NOT_ALLOWED",
        )


class DuplicateStatementException(DomainException):
    """Raised when a statement already exists for an account and cycle end."""

    def __init__(self, account_id: str, cycle_end: str):
        super().__init__(
            message=f"Statement already exists for account {account_id} at {cycle_end}",
            code="STATEMENT_EXISTS",
        )
        self.account_id = account_id
        self.cycle_end = cycle_end
