"""
Cash-flow planning rules.

Period boundaries and recurring schedule projections used by the planning
summary and the recurring transaction processor.
"""

from .periods import (
    PeriodType,
    PlanningPeriod,
    payment_dates_between,
    planning_period,
    upcoming_window,
)
from .recurrence import (
    MAX_PROJECTED_OCCURRENCES,
    Occurrence,
    next_occurrence,
    project_occurrences,
)

__all__ = [
    "PeriodType",
    "PlanningPeriod",
    "planning_period",
    "upcoming_window",
    "payment_dates_between",
    "MAX_PROJECTED_OCCURRENCES",
    "Occurrence",
    "next_occurrence",
    "project_occurrences",
]
