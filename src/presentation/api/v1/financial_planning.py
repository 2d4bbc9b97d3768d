"""Financial planning API endpoints."""

from decimal import Decimal
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.application.services import PlanningService
from src.core.dependencies import CurrentUser, get_planning_service
from src.presentation.schemas import (
    CardInterestSchema,
    ErrorResponseSchema,
    PeriodSummarySchema,
    UpcomingCommitmentsSchema,
)
from src.service.planning import PeriodType

financial_planning_router = APIRouter(
    prefix="/financial-planning",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        401: {"model": ErrorResponseSchema, "description": "Missing user"},
    },
)


@financial_planning_router.get(
    "/summary",
    response_model=PeriodSummarySchema,
    summary="Period Summary",
    description="""Compare cash on hand with what the period brings and demands.

Expected income and expenses come from the active recurring schedules.
Card payments due in the period include each installment plan's monthly
payment and the cycle's regular charges not yet paid.""",
)
async def get_period_summary(
    user_id: CurrentUser,
    planning_service: Annotated[PlanningService, Depends(get_planning_service)],
    period: PeriodType = Query(PeriodType.BIWEEKLY, description="weekly, biweekly or monthly"),
) -> PeriodSummarySchema:
    summary = await planning_service.get_period_summary(user_id, period)
    return PeriodSummarySchema.model_validate(summary)


@financial_planning_router.get(
    "/upcoming",
    response_model=UpcomingCommitmentsSchema,
    summary="Upcoming Commitments",
)
async def get_upcoming_commitments(
    user_id: CurrentUser,
    planning_service: Annotated[PlanningService, Depends(get_planning_service)],
    days: int = Query(7, ge=1, le=90),
) -> UpcomingCommitmentsSchema:
    upcoming = await planning_service.get_upcoming_commitments(user_id, days)
    return UpcomingCommitmentsSchema.model_validate(upcoming)


@financial_planning_router.get(
    "/card-interest/{account_id}",
    response_model=CardInterestSchema,
    summary="Card Interest Projection",
    description="Estimate interest and payoff time for the card's current debt.",
    responses={404: {"model": ErrorResponseSchema, "description": "Credit card not found"}},
)
async def get_card_interest(
    account_id: UUID,
    user_id: CurrentUser,
    planning_service: Annotated[PlanningService, Depends(get_planning_service)],
    annual_rate: Decimal = Query(..., ge=0, le=10, description="Annual rate as a fraction, 0.45 for 45%"),
    monthly_payment: Optional[Decimal] = Query(None, gt=0, description="Defaults to the minimum payment"),
) -> CardInterestSchema:
    projection = await planning_service.project_card_interest(
        user_id,
        account_id,
        annual_rate,
        monthly_payment,
    )
    return CardInterestSchema.model_validate(projection)
