"""Transaction-related Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import TransactionType


class PostTransactionSchema(BaseModel):
    """Schema for POST /v1/transactions request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "amount": 1500,
                    "type": "transfer",
                    "account_id": "550e8400-e29b-41d4-a716-446655440000",
                    "destination_account_id": "6fa459ea-ee8a-3ca4-894e-db77e160355e",
                    "description": "Card payment",
                }
            ]
        }
    )

    amount: Decimal = Field(..., gt=0, description="Positive amount", examples=[1500])
    type: TransactionType = Field(..., description="income, expense or transfer")
    account_id: UUID = Field(..., description="Source account")
    destination_account_id: Optional[UUID] = Field(None, description="Target account, transfers only")
    description: str = Field("", max_length=1000)
    date: Optional[datetime] = Field(None, description="Defaults to now")
    category_id: Optional[str] = Field(None, description="Ignored for transfers")
    installment_purchase_id: Optional[UUID] = Field(
        None,
        description="Installment plan this movement pays or belongs to",
    )
    recurring_transaction_id: Optional[UUID] = Field(
        None,
        description="Recurring schedule this movement settles",
    )


class TransactionSchema(BaseModel):
    """Schema for a transaction in responses."""

    model_config = ConfigDict(from_attributes=True)

    transaction_id: str
    user_id: str
    amount: float
    description: str
    date: datetime
    type: str
    account_id: str
    destination_account_id: Optional[str] = None
    category_id: Optional[str] = None
    installment_purchase_id: Optional[str] = None
    recurring_transaction_id: Optional[str] = None
    statement_id: Optional[str] = None
    affects_balance: bool = True
