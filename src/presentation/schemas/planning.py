"""Financial planning Pydantic schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ExpectedItemSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    recurring_id: str
    description: str
    amount: float
    due_date: datetime
    account_id: str
    category_id: Optional[str] = None
    is_overdue: bool


class CardPaymentDueSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account_id: str
    account_name: str
    description: str
    amount: float
    due_date: datetime
    is_msi: bool
    installment_id: Optional[str] = None
    total_amount: Optional[float] = None
    paid_amount: Optional[float] = None


class PeriodSummarySchema(BaseModel):
    """Schema for GET /v1/financial-planning/summary response."""

    model_config = ConfigDict(from_attributes=True)

    period_type: str
    period_start: datetime
    period_end: datetime
    current_balance: float
    current_debt: float
    current_msi_debt: float
    expected_income: List[ExpectedItemSchema]
    expected_expenses: List[ExpectedItemSchema]
    card_payments_due: List[CardPaymentDueSchema]
    total_expected_income: float
    total_commitments: float
    disposable_income: float
    is_sufficient: bool
    shortfall: float
    warnings: List[str]


class CommitmentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: str
    description: str
    amount: float
    due_date: datetime
    account_id: str
    is_overdue: bool


class UpcomingCommitmentsSchema(BaseModel):
    """Schema for GET /v1/financial-planning/upcoming response."""

    model_config = ConfigDict(from_attributes=True)

    window_start: datetime
    window_end: datetime
    commitments: List[CommitmentSchema]
    total: float


class AmortizationRowSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: int
    payment: float
    principal: float
    interest: float
    balance: float


class MinimumPaymentCostSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    months: int
    total_paid: float
    total_interest: float
    remaining_balance: float
    paid_off: bool


class CardInterestSchema(BaseModel):
    """Schema for GET /v1/financial-planning/card-interest/{account_id} response."""

    model_config = ConfigDict(from_attributes=True)

    account_id: str
    balance: float
    annual_rate: float
    monthly_interest: float
    minimum_payment: float
    monthly_payment: float
    payoff_months: Optional[int] = None
    minimum_only: MinimumPaymentCostSchema
    amortization: List[AmortizationRowSchema]
