from fastapi import APIRouter

from .accounts import accounts_router
from .credit_card_payments import credit_card_payments_router
from .financial_planning import financial_planning_router
from .health import health_router
from .installments import installments_router
from .recurring import recurring_router
from .transactions import transactions_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(accounts_router, tags=["Accounts"])
router.include_router(transactions_router, tags=["Transactions"])
router.include_router(installments_router, tags=["Installments"])
router.include_router(credit_card_payments_router, tags=["Credit Card Payments"])
router.include_router(recurring_router, tags=["Recurring Transactions"])
router.include_router(financial_planning_router, tags=["Financial Planning"])
