"""Credit-card statement and payment Pydantic schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PaymentRequestSchema(BaseModel):
    """Schema for pay-statement and pay-msi request bodies."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [{"source_account_id": "550e8400-e29b-41d4-a716-446655440000"}]
        }
    )

    source_account_id: UUID = Field(..., description="Account the money comes from")
    date: Optional[datetime] = Field(None, description="Payment date, defaults to now")


class BillingCycleSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start_date: datetime
    cutoff_date: datetime
    payment_date: datetime
    is_before_cutoff: bool
    days_until_cutoff: int
    days_until_payment: int


class MsiChargeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    installment_id: str
    description: str
    amount: float
    current_installment: int
    total_installments: int
    remaining_amount: float
    paid_amount: float
    category_name: str
    category_color: str
    category_icon: str


class RegularChargeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    transaction_id: str
    description: str
    amount: float
    date: datetime
    category_name: str
    category_color: str
    category_icon: str


class PaymentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    transaction_id: str
    amount: float
    date: datetime
    description: str


class StatementDetailsSchema(BaseModel):
    """Schema for GET /v1/credit-card-payments/statement/{account_id} response."""

    model_config = ConfigDict(from_attributes=True)

    account_id: str
    account_name: str
    credit_limit: Optional[float] = None
    current_balance: float
    billing_cycle: BillingCycleSchema
    msi_charges: List[MsiChargeSchema]
    msi_total: float
    msi_count: int
    regular_charges: List[RegularChargeSchema]
    regular_total: float
    regular_count: int
    total_due: float
    total_paid: float
    remaining_due: float
    is_fully_paid: bool
    payments: List[PaymentSchema]


class StatementSchema(BaseModel):
    """Schema for a frozen statement."""

    model_config = ConfigDict(from_attributes=True)

    statement_id: str
    account_id: str
    cycle_start: datetime
    cycle_end: datetime
    payment_due_date: datetime
    regular_charges: float
    msi_amount: float
    total_due: float
    minimum_payment: float
    paid_amount: float
    status: str = Field(..., examples=["PENDING"])


class StatementPaymentSchema(BaseModel):
    """Schema for POST /v1/credit-card-payments/pay-statement/{account_id} response."""

    model_config = ConfigDict(from_attributes=True)

    amount: float
    description: str
    msi_paid: int
    regular_paid: int
    transactions_created: int
    transaction_ids: List[str]


class MsiPaymentSchema(BaseModel):
    """Schema for POST /v1/credit-card-payments/pay-msi/{installment_id} response."""

    model_config = ConfigDict(from_attributes=True)

    transaction_id: str
    amount: float
    description: str
    installment_number: int
    total_installments: int
    remaining_amount: float


class RevertSchema(BaseModel):
    """Schema for POST /v1/credit-card-payments/revert/{transaction_id} response."""

    model_config = ConfigDict(from_attributes=True)

    transaction_id: str
    amount_reverted: float
