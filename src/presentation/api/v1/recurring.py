"""Recurring transaction API endpoints."""

from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends

from src.application.dto import CreateRecurringRequest, UpdateRecurringRequest
from src.application.services import RecurringService
from src.core.dependencies import CurrentUser, get_recurring_service
from src.presentation.schemas import (
    CreateRecurringSchema,
    ErrorResponseSchema,
    RecurringRunSchema,
    RecurringSchema,
    UpdateRecurringSchema,
)

recurring_router = APIRouter(
    prefix="/recurring",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        401: {"model": ErrorResponseSchema, "description": "Missing user"},
        404: {"model": ErrorResponseSchema, "description": "Schedule or account not found"},
    },
)


@recurring_router.post(
    "",
    response_model=RecurringSchema,
    status_code=201,
    summary="Create Recurring Transaction",
    description="Schedule an income or expense that posts to an account on every occurrence.",
)
async def create_recurring(
    request: CreateRecurringSchema,
    user_id: CurrentUser,
    recurring_service: Annotated[RecurringService, Depends(get_recurring_service)],
) -> RecurringSchema:
    dto = CreateRecurringRequest(
        user_id=user_id,
        description=request.description,
        amount=request.amount,
        type=request.type,
        frequency=request.frequency,
        start_date=request.start_date,
        account_id=request.account_id,
        category_id=request.category_id,
    )
    response = await recurring_service.create_recurring(dto)
    return RecurringSchema.model_validate(response)


@recurring_router.get(
    "",
    response_model=List[RecurringSchema],
    summary="List Recurring Transactions",
)
async def list_recurring(
    user_id: CurrentUser,
    recurring_service: Annotated[RecurringService, Depends(get_recurring_service)],
) -> List[RecurringSchema]:
    schedules = await recurring_service.list_recurring(user_id)
    return [RecurringSchema.model_validate(r) for r in schedules]


@recurring_router.post(
    "/process",
    response_model=RecurringRunSchema,
    summary="Post Due Recurring Transactions",
    description="Post every occurrence of the user's schedules due by the end of today.",
)
async def process_recurring(
    user_id: CurrentUser,
    recurring_service: Annotated[RecurringService, Depends(get_recurring_service)],
) -> RecurringRunSchema:
    result = await recurring_service.process_recurring_transactions(user_id)
    return RecurringRunSchema.model_validate(result)


@recurring_router.get(
    "/{recurring_id}",
    response_model=RecurringSchema,
    summary="Get Recurring Transaction",
)
async def get_recurring(
    recurring_id: UUID,
    user_id: CurrentUser,
    recurring_service: Annotated[RecurringService, Depends(get_recurring_service)],
) -> RecurringSchema:
    response = await recurring_service.get_recurring(user_id, recurring_id)
    return RecurringSchema.model_validate(response)


@recurring_router.put(
    "/{recurring_id}",
    response_model=RecurringSchema,
    summary="Update Recurring Transaction",
)
async def update_recurring(
    recurring_id: UUID,
    request: UpdateRecurringSchema,
    user_id: CurrentUser,
    recurring_service: Annotated[RecurringService, Depends(get_recurring_service)],
) -> RecurringSchema:
    dto = UpdateRecurringRequest(
        description=request.description,
        amount=request.amount,
        frequency=request.frequency,
        next_due_date=request.next_due_date,
        category_id=request.category_id,
    )
    response = await recurring_service.update_recurring(user_id, recurring_id, dto)
    return RecurringSchema.model_validate(response)


@recurring_router.delete(
    "/{recurring_id}",
    status_code=204,
    summary="Stop Recurring Transaction",
    description="Deactivate a schedule. Transactions it already posted are kept.",
)
async def delete_recurring(
    recurring_id: UUID,
    user_id: CurrentUser,
    recurring_service: Annotated[RecurringService, Depends(get_recurring_service)],
) -> None:
    await recurring_service.delete_recurring(user_id, recurring_id)
