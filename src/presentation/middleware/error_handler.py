"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from src.domain.exceptions import (
    AlreadySettledException,
    DomainException,
    DuplicateStatementException,
    InsufficientFundsException,
    NotFoundException,
    OverpaymentRejectedException,
    RevertNotAllowedException,
    ValidationException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": code,
            "message": message,
            "request_id": get_request_id(),
        },
    )


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    @app.exception_handler(NotFoundException)
    async def not_found_handler(
        request: Request,
        exc: NotFoundException,
    ) -> JSONResponse:
        """Handle missing or foreign entities."""
        return _error_response(404, exc.code, exc.message)

    @app.exception_handler(AlreadySettledException)
    async def already_settled_handler(
        request: Request,
        exc: AlreadySettledException,
    ) -> JSONResponse:
        """Handle payments against plans or cards with nothing due."""
        return _error_response(409, exc.code, exc.message)

    @app.exception_handler(DuplicateStatementException)
    async def duplicate_statement_handler(
        request: Request,
        exc: DuplicateStatementException,
    ) -> JSONResponse:
        return _error_response(409, exc.code, exc.message)

    @app.exception_handler(InsufficientFundsException)
    async def insufficient_funds_handler(
        request: Request,
        exc: InsufficientFundsException,
    ) -> JSONResponse:
        """Handle outflows larger than the available balance."""
        logger.info(
            "insufficient_funds",
            request_id=get_request_id(),
            available=str(exc.available),
            required=str(exc.required),
        )
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(OverpaymentRejectedException)
    async def overpayment_handler(
        request: Request,
        exc: OverpaymentRejectedException,
    ) -> JSONResponse:
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(RevertNotAllowedException)
    async def revert_not_allowed_handler(
        request: Request,
        exc: RevertNotAllowedException,
    ) -> JSONResponse:
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(ValidationException)
    async def validation_handler(
        request: Request,
        exc: ValidationException,
    ) -> JSONResponse:
        """Handle invalid request errors."""
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Wrap framework HTTP errors in the standard error body."""
        code = "UNAUTHORIZED" if exc.status_code == 401 else f"HTTP_{exc.status_code}"
        return _error_response(exc.status_code, code, str(exc.detail))

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred.")
