"""
Credit-card billing rules.

Pure calculations used by the ledger services and the planning
projections. Nothing in this package touches the database.

Usage:
    from src.service.billing import get_billing_cycle, attribute_installments

    cycle = get_billing_cycle(cutoff_day=20, payment_day=5)
    charges = attribute_installments(plans, cycle.cycle_start_date, cycle.cutoff_date)
"""

from .attribution import (
    InstallmentCharge,
    attribute_installments,
    charge_date_in_cycle,
    is_paid_in_month,
)
from .cycle import BillingCycle, get_billing_cycle, validate_cycle_days
from .interest import (
    AmortizationRow,
    MinimumPaymentCost,
    amortization_table,
    minimum_payment_cost,
    monthly_interest,
    projected_payoff_months,
)
from .money import ZERO, split_evenly, to_money
from .settings import BillingSettings, billing_settings, get_billing_settings
from .statement import (
    StatementWindow,
    flat_msi_amount,
    minimum_payment,
    statement_status,
    statement_window,
)

__all__ = [
    # Cycle
    "BillingCycle",
    "get_billing_cycle",
    "validate_cycle_days",
    # Attribution
    "InstallmentCharge",
    "attribute_installments",
    "charge_date_in_cycle",
    "is_paid_in_month",
    # Statements
    "StatementWindow",
    "statement_window",
    "flat_msi_amount",
    "minimum_payment",
    "statement_status",
    # Interest
    "AmortizationRow",
    "MinimumPaymentCost",
    "monthly_interest",
    "projected_payoff_months",
    "minimum_payment_cost",
    "amortization_table",
    # Money
    "ZERO",
    "to_money",
    "split_evenly",
    # Settings
    "BillingSettings",
    "billing_settings",
    "get_billing_settings",
]
