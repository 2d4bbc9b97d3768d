"""Installment purchase Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateInstallmentSchema(BaseModel):
    """Schema for POST /v1/installments request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "description": "Laptop",
                    "total_amount": 18000,
                    "installments": 12,
                    "purchase_date": "2025-03-15T12:00:00",
                    "account_id": "550e8400-e29b-41d4-a716-446655440000",
                }
            ]
        }
    )

    description: str = Field(..., min_length=1, max_length=1000)
    total_amount: Decimal = Field(..., gt=0, examples=[18000])
    installments: int = Field(..., ge=1, le=120, examples=[12])
    purchase_date: datetime
    account_id: UUID = Field(..., description="Credit card the purchase is charged to")
    category_id: Optional[str] = None


class PayInstallmentSchema(BaseModel):
    """Schema for POST /v1/installments/{installment_id}/pay request body."""

    amount: Decimal = Field(..., gt=0, examples=[1500])
    source_account_id: Optional[UUID] = Field(
        None,
        description="Paying account; omitted means an income on the card itself",
    )
    date: Optional[datetime] = None


class InstallmentSchema(BaseModel):
    """Schema for an installment purchase in responses."""

    model_config = ConfigDict(from_attributes=True)

    installment_id: str
    user_id: str
    account_id: str
    description: str
    total_amount: float
    installments: int
    monthly_payment: float
    purchase_date: datetime
    category_id: Optional[str] = None
    paid_installments: int
    paid_amount: float
    remaining_amount: float
    billed_installments: int
    is_paid_off: bool


class ProcessInstallmentsSchema(BaseModel):
    """Schema for POST /v1/installments/process response."""

    charges_created: int = Field(..., ge=0)
