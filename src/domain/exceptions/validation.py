"""Input validation domain exceptions."""

from .base import DomainException


class ValidationException(DomainException):
    """Raised when a request breaks a ledger rule before anything is written."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
        )
        self.field = field
