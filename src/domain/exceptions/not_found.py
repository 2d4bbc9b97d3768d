"""Lookup failures for ledger entities."""

from .base import DomainException


class NotFoundException(DomainException):
    """Raised when an entity does not exist or is not visible to the user."""

    entity = "Entity"

    def __init__(self, entity_id: str):
        super().__init__(
            message=f"{self.entity} not found: {entity_id}",
            code=f"{self.entity.upper().replace(' ', '_')}_NOT_FOUND",
        )
        self.entity_id = entity_id


class AccountNotFoundException(NotFoundException):
    entity = "Account"


class TransactionNotFoundException(NotFoundException):
    entity = "Transaction"


class InstallmentNotFoundException(NotFoundException):
    entity = "Installment"


class StatementNotFoundException(NotFoundException):
    entity = "Statement"


class RecurringTransactionNotFoundException(NotFoundException):
    entity = "Recurring transaction"
