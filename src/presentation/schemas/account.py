"""Account-related Pydantic schemas."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateAccountSchema(BaseModel):
    """Schema for POST /v1/accounts request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Gold Card",
                    "type": "CREDIT",
                    "balance": 0,
                    "credit_limit": 50000,
                    "cutoff_day": 20,
                    "payment_day": 5,
                }
            ]
        }
    )

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    type: str = Field(
        ...,
        description="CASH, DEBIT or CREDIT (legacy spellings such as 'Credit Card' are accepted)",
        examples=["CREDIT"],
    )
    balance: Decimal = Field(
        default=Decimal("0"),
        description="Opening balance; debt owed for credit cards",
        examples=[0],
    )
    credit_limit: Optional[Decimal] = Field(None, ge=0, description="Credit limit of a card")
    cutoff_day: Optional[int] = Field(None, ge=1, le=31, description="Card cutoff day of month")
    payment_day: Optional[int] = Field(None, ge=1, le=31, description="Card payment day of month")


class AccountSchema(BaseModel):
    """Schema for an account in responses."""

    model_config = ConfigDict(from_attributes=True)

    account_id: str = Field(..., description="UUID of the account")
    user_id: str
    name: str
    type: str = Field(..., examples=["CREDIT"])
    balance: float = Field(..., description="Money held, or debt owed for credit cards")
    credit_limit: Optional[float] = None
    available_credit: Optional[float] = None
    cutoff_day: Optional[int] = None
    payment_day: Optional[int] = None
    is_archived: bool = False


class AccountDeletionSchema(BaseModel):
    """Schema for DELETE /v1/accounts/{account_id} response."""

    model_config = ConfigDict(from_attributes=True)

    account_id: str
    deleted: bool = Field(..., description="True when the account row was removed")
    archived: bool = Field(..., description="True when the account was archived because it is in use")


class BalancePointSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    balance: float


class NetWorthPointSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    assets: float
    liabilities: float
    net_worth: float
