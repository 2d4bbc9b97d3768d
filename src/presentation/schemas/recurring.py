"""Recurring transaction Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import Frequency, TransactionType


class CreateRecurringSchema(BaseModel):
    """Schema for POST /v1/recurring request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "description": "Salary",
                    "amount": 25000,
                    "type": "income",
                    "frequency": "biweekly_15_30",
                    "start_date": "2025-06-15T09:00:00",
                    "account_id": "550e8400-e29b-41d4-a716-446655440000",
                }
            ]
        }
    )

    description: str = Field(..., min_length=1, max_length=1000)
    amount: Decimal = Field(..., gt=0, examples=[25000])
    type: TransactionType = Field(..., description="income or expense")
    frequency: Frequency
    start_date: datetime = Field(..., description="First occurrence")
    account_id: UUID = Field(..., description="Account the occurrences post to")
    category_id: Optional[str] = None


class UpdateRecurringSchema(BaseModel):
    """Schema for PUT /v1/recurring/{recurring_id} request body."""

    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    amount: Optional[Decimal] = Field(None, gt=0)
    frequency: Optional[Frequency] = None
    next_due_date: Optional[datetime] = None
    category_id: Optional[str] = None


class RecurringSchema(BaseModel):
    """Schema for a recurring schedule in responses."""

    model_config = ConfigDict(from_attributes=True)

    recurring_id: str
    user_id: str
    account_id: str
    description: str
    amount: float
    type: str
    frequency: str
    next_due_date: datetime
    category_id: Optional[str] = None
    is_active: bool
    last_run: Optional[datetime] = None


class RecurringRunSchema(BaseModel):
    """Schema for POST /v1/recurring/process response."""

    model_config = ConfigDict(from_attributes=True)

    processed: int = Field(..., ge=0)
    posted: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
