"""Credit-card statement and payment API endpoints."""

from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends

from src.application.services import PaymentService, StatementService
from src.core.dependencies import CurrentUser, get_payment_service, get_statement_service
from src.presentation.schemas import (
    ErrorResponseSchema,
    MsiPaymentSchema,
    PaymentRequestSchema,
    RevertSchema,
    StatementDetailsSchema,
    StatementPaymentSchema,
    StatementSchema,
)

credit_card_payments_router = APIRouter(
    prefix="/credit-card-payments",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Payment rejected"},
        401: {"model": ErrorResponseSchema, "description": "Missing user"},
        404: {"model": ErrorResponseSchema, "description": "Card, plan or transaction not found"},
        409: {"model": ErrorResponseSchema, "description": "Nothing left to pay"},
    },
)


@credit_card_payments_router.get(
    "/statement/{account_id}",
    response_model=StatementDetailsSchema,
    summary="Current Statement",
    description="""Describe the card's current billing cycle.

Lists the installment charges and regular expenses that fall in the cycle,
the totals due and the payments received so far.""",
)
async def get_statement(
    account_id: UUID,
    user_id: CurrentUser,
    statement_service: Annotated[StatementService, Depends(get_statement_service)],
) -> StatementDetailsSchema:
    details = await statement_service.get_statement_details(user_id, account_id)
    return StatementDetailsSchema.model_validate(details)


@credit_card_payments_router.get(
    "/statements/{account_id}",
    response_model=List[StatementSchema],
    summary="List Frozen Statements",
)
async def list_statements(
    account_id: UUID,
    user_id: CurrentUser,
    statement_service: Annotated[StatementService, Depends(get_statement_service)],
) -> List[StatementSchema]:
    statements = await statement_service.list_statements(user_id, account_id)
    return [StatementSchema.model_validate(s) for s in statements]


@credit_card_payments_router.post(
    "/pay-statement/{account_id}",
    response_model=StatementPaymentSchema,
    summary="Pay Full Statement",
    description="Pay every charge of the current cycle from another account, in one atomic operation.",
)
async def pay_statement(
    account_id: UUID,
    request: PaymentRequestSchema,
    user_id: CurrentUser,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> StatementPaymentSchema:
    result = await payment_service.pay_full_statement(
        user_id,
        account_id,
        request.source_account_id,
        date=request.date,
    )
    return StatementPaymentSchema.model_validate(result)


@credit_card_payments_router.post(
    "/pay-msi/{installment_id}",
    response_model=MsiPaymentSchema,
    summary="Pay One Installment",
)
async def pay_msi(
    installment_id: UUID,
    request: PaymentRequestSchema,
    user_id: CurrentUser,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> MsiPaymentSchema:
    result = await payment_service.pay_msi_installment(
        user_id,
        installment_id,
        request.source_account_id,
        date=request.date,
    )
    return MsiPaymentSchema.model_validate(result)


@credit_card_payments_router.post(
    "/revert/{transaction_id}",
    response_model=RevertSchema,
    summary="Revert Card Payment",
)
async def revert_payment(
    transaction_id: UUID,
    user_id: CurrentUser,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> RevertSchema:
    result = await payment_service.revert_statement_payment(user_id, transaction_id)
    return RevertSchema.model_validate(result)
