"""Account API endpoints."""

from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.application.dto import CreateAccountRequest
from src.application.services import AccountService, SnapshotService
from src.core.dependencies import CurrentUser, get_account_service, get_snapshot_service
from src.presentation.schemas import (
    AccountDeletionSchema,
    AccountSchema,
    BalancePointSchema,
    CreateAccountSchema,
    ErrorResponseSchema,
    NetWorthPointSchema,
)

accounts_router = APIRouter(
    prefix="/accounts",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        401: {"model": ErrorResponseSchema, "description": "Missing user"},
        404: {"model": ErrorResponseSchema, "description": "Account not found"},
    },
)


@accounts_router.post(
    "",
    response_model=AccountSchema,
    status_code=201,
    summary="Open Account",
    description="Open a cash, debit or credit account. Credit accounts need a cutoff and payment day.",
)
async def create_account(
    request: CreateAccountSchema,
    user_id: CurrentUser,
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountSchema:
    dto = CreateAccountRequest(
        user_id=user_id,
        name=request.name,
        type=request.type,
        balance=request.balance,
        credit_limit=request.credit_limit,
        cutoff_day=request.cutoff_day,
        payment_day=request.payment_day,
    )
    response = await account_service.create_account(dto)
    return AccountSchema.model_validate(response)


@accounts_router.get(
    "",
    response_model=List[AccountSchema],
    summary="List Accounts",
)
async def list_accounts(
    user_id: CurrentUser,
    account_service: Annotated[AccountService, Depends(get_account_service)],
    include_archived: bool = Query(False, description="Include archived accounts"),
) -> List[AccountSchema]:
    accounts = await account_service.list_accounts(user_id, include_archived=include_archived)
    return [AccountSchema.model_validate(a) for a in accounts]


@accounts_router.get(
    "/net-worth",
    response_model=List[NetWorthPointSchema],
    summary="Net Worth History",
    description="Daily assets, liabilities and net worth built from balance snapshots.",
)
async def get_net_worth(
    user_id: CurrentUser,
    snapshot_service: Annotated[SnapshotService, Depends(get_snapshot_service)],
    days: int = Query(30, ge=1, le=366),
) -> List[NetWorthPointSchema]:
    points = await snapshot_service.get_net_worth_history(user_id, days=days)
    return [NetWorthPointSchema.model_validate(p) for p in points]


@accounts_router.get(
    "/{account_id}",
    response_model=AccountSchema,
    summary="Get Account",
)
async def get_account(
    account_id: UUID,
    user_id: CurrentUser,
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountSchema:
    response = await account_service.get_account(user_id, account_id)
    return AccountSchema.model_validate(response)


@accounts_router.get(
    "/{account_id}/history",
    response_model=List[BalancePointSchema],
    summary="Balance History",
    description="Daily balance snapshots of one account, oldest first.",
)
async def get_balance_history(
    account_id: UUID,
    user_id: CurrentUser,
    snapshot_service: Annotated[SnapshotService, Depends(get_snapshot_service)],
    days: int = Query(30, ge=1, le=366),
) -> List[BalancePointSchema]:
    points = await snapshot_service.get_balance_history(user_id, account_id, days=days)
    return [BalancePointSchema.model_validate(p) for p in points]


@accounts_router.delete(
    "/{account_id}",
    response_model=AccountDeletionSchema,
    summary="Delete Account",
    description="Delete an account. Accounts with ledger history are archived instead.",
)
async def delete_account(
    account_id: UUID,
    user_id: CurrentUser,
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountDeletionSchema:
    result = await account_service.delete_account(user_id, account_id)
    return AccountDeletionSchema.model_validate(result)
