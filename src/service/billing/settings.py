"""
Billing Settings for the credit-card cycle engine.

Tolerances and statement constants used by the ledger, the statement
generator and the payment orchestrator. Values can be tuned via environment
variables with the BILLING_ prefix:
    BILLING_SETTLEMENT_EPSILON=0.05
    BILLING_MINIMUM_PAYMENT_FLOOR=200

Usage:
    from src.service.billing.settings import billing_settings

    eps = billing_settings.settlement_epsilon

    # Or create custom settings for testing
    custom = BillingSettings(minimum_payment_floor=Decimal("100"))
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BillingSettings(BaseSettings):
    """
    Configurable parameters for billing and settlement.

    All monetary values are in account currency units.
    """

    model_config = SettingsConfigDict(
        env_prefix="BILLING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    settlement_epsilon: Decimal = Field(
        default=Decimal("0.05"),
        ge=0,
        description="Tolerance under which an installment plan counts as fully paid",
    )
    fully_paid_tolerance: Decimal = Field(
        default=Decimal("0.01"),
        ge=0,
        description="Remaining due at or below which a statement view is fully paid",
    )
    minimum_payment_rate: Decimal = Field(
        default=Decimal("0.05"),
        gt=0,
        le=1,
        description="Share of the total due required as minimum payment",
    )
    minimum_payment_floor: Decimal = Field(
        default=Decimal("200"),
        ge=0,
        description="Fixed minimum payment amount",
    )
    default_payment_offset_days: int = Field(
        default=20,
        ge=1,
        description="Days after cutoff used as due date when a card has no payment day",
    )


@lru_cache
def get_billing_settings() -> BillingSettings:
    """Get cached billing settings instance."""
    return BillingSettings()


billing_settings = get_billing_settings()
