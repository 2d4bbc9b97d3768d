"""Transaction API endpoints."""

from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.application.dto import PostTransactionRequest
from src.application.services import TransactionService
from src.core.dependencies import CurrentUser, get_transaction_service
from src.presentation.schemas import (
    ErrorResponseSchema,
    PostTransactionSchema,
    TransactionSchema,
)

transactions_router = APIRouter(
    prefix="/transactions",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Rejected by the ledger"},
        401: {"model": ErrorResponseSchema, "description": "Missing user"},
        404: {"model": ErrorResponseSchema, "description": "Transaction or account not found"},
    },
)


@transactions_router.post(
    "",
    response_model=TransactionSchema,
    status_code=201,
    summary="Post Transaction",
    description="""Post an income, expense or transfer.

Balances of the involved accounts change atomically with the transaction.
Transfers into a credit card may not exceed its debt.""",
)
async def post_transaction(
    request: PostTransactionSchema,
    user_id: CurrentUser,
    transaction_service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> TransactionSchema:
    dto = PostTransactionRequest(
        user_id=user_id,
        amount=request.amount,
        type=request.type,
        account_id=request.account_id,
        description=request.description,
        date=request.date,
        destination_account_id=request.destination_account_id,
        category_id=request.category_id,
        installment_purchase_id=request.installment_purchase_id,
        recurring_transaction_id=request.recurring_transaction_id,
    )
    response = await transaction_service.post_transaction(dto)
    return TransactionSchema.model_validate(response)


@transactions_router.get(
    "",
    response_model=List[TransactionSchema],
    summary="List Transactions",
)
async def list_transactions(
    user_id: CurrentUser,
    transaction_service: Annotated[TransactionService, Depends(get_transaction_service)],
    account_id: Optional[UUID] = Query(None, description="Only movements touching this account"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> List[TransactionSchema]:
    transactions = await transaction_service.list_transactions(
        user_id,
        account_id=account_id,
        limit=limit,
        offset=offset,
    )
    return [TransactionSchema.model_validate(t) for t in transactions]


@transactions_router.get(
    "/{transaction_id}",
    response_model=TransactionSchema,
    summary="Get Transaction",
)
async def get_transaction(
    transaction_id: UUID,
    user_id: CurrentUser,
    transaction_service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> TransactionSchema:
    response = await transaction_service.get_transaction(user_id, transaction_id)
    return TransactionSchema.model_validate(response)


@transactions_router.delete(
    "/{transaction_id}",
    response_model=TransactionSchema,
    summary="Delete Transaction",
    description="Reverse the balance effect of a transaction and mark it deleted.",
)
async def delete_transaction(
    transaction_id: UUID,
    user_id: CurrentUser,
    transaction_service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> TransactionSchema:
    response = await transaction_service.delete_transaction(user_id, transaction_id)
    return TransactionSchema.model_validate(response)
