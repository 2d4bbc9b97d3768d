"""Installment purchase API endpoints."""

from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends

from src.application.dto import CreateInstallmentRequest
from src.application.services import InstallmentService
from src.core.dependencies import CurrentUser, get_installment_service
from src.presentation.schemas import (
    CreateInstallmentSchema,
    ErrorResponseSchema,
    InstallmentSchema,
    PayInstallmentSchema,
    ProcessInstallmentsSchema,
)

installments_router = APIRouter(
    prefix="/installments",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        401: {"model": ErrorResponseSchema, "description": "Missing user"},
        404: {"model": ErrorResponseSchema, "description": "Installment purchase not found"},
    },
)


@installments_router.post(
    "",
    response_model=InstallmentSchema,
    status_code=201,
    summary="Create Installment Purchase",
    description="Register a purchase paid in monthly installments and charge its total to the card.",
)
async def create_installment(
    request: CreateInstallmentSchema,
    user_id: CurrentUser,
    installment_service: Annotated[InstallmentService, Depends(get_installment_service)],
) -> InstallmentSchema:
    dto = CreateInstallmentRequest(
        user_id=user_id,
        description=request.description,
        total_amount=request.total_amount,
        installments=request.installments,
        purchase_date=request.purchase_date,
        account_id=request.account_id,
        category_id=request.category_id,
    )
    response = await installment_service.create_installment(dto)
    return InstallmentSchema.model_validate(response)


@installments_router.get(
    "",
    response_model=List[InstallmentSchema],
    summary="List Installment Purchases",
    description="List the user's plans. Drifted progress counters are repaired on the way.",
)
async def list_installments(
    user_id: CurrentUser,
    installment_service: Annotated[InstallmentService, Depends(get_installment_service)],
) -> List[InstallmentSchema]:
    installments = await installment_service.list_installments(user_id)
    return [InstallmentSchema.model_validate(i) for i in installments]


@installments_router.post(
    "/process",
    response_model=ProcessInstallmentsSchema,
    summary="Record Due Installment Charges",
    description="Create the monthly charges that came due and are not recorded yet. Safe to repeat.",
)
async def process_installments(
    user_id: CurrentUser,
    installment_service: Annotated[InstallmentService, Depends(get_installment_service)],
) -> ProcessInstallmentsSchema:
    created = await installment_service.process_installment_purchases(user_id)
    return ProcessInstallmentsSchema(charges_created=created)


@installments_router.get(
    "/{installment_id}",
    response_model=InstallmentSchema,
    summary="Get Installment Purchase",
)
async def get_installment(
    installment_id: UUID,
    user_id: CurrentUser,
    installment_service: Annotated[InstallmentService, Depends(get_installment_service)],
) -> InstallmentSchema:
    response = await installment_service.get_installment(user_id, installment_id)
    return InstallmentSchema.model_validate(response)


@installments_router.post(
    "/{installment_id}/pay",
    response_model=InstallmentSchema,
    summary="Pay Toward Installment Purchase",
)
async def pay_installment(
    installment_id: UUID,
    request: PayInstallmentSchema,
    user_id: CurrentUser,
    installment_service: Annotated[InstallmentService, Depends(get_installment_service)],
) -> InstallmentSchema:
    response = await installment_service.pay_installment(
        user_id,
        installment_id,
        amount=request.amount,
        source_account_id=request.source_account_id,
        date=request.date,
    )
    return InstallmentSchema.model_validate(response)


@installments_router.delete(
    "/{installment_id}",
    status_code=204,
    summary="Delete Installment Purchase",
    description="Delete a plan and every transaction linked to it, restoring account balances.",
)
async def delete_installment(
    installment_id: UUID,
    user_id: CurrentUser,
    installment_service: Annotated[InstallmentService, Depends(get_installment_service)],
) -> None:
    await installment_service.delete_installment(user_id, installment_id)
