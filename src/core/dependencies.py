"""Dependency injection for FastAPI."""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException

from src.application.services import (
    AccountService,
    InstallmentService,
    PaymentService,
    PlanningService,
    PostingEngine,
    RecurringService,
    SnapshotService,
    StatementService,
    TransactionService,
)
from src.domain.interfaces import CategoryLookupClient, UnitOfWorkFactory
from src.infrastructure.clients import HttpCategoryClient
from src.infrastructure.database import db_manager
from src.infrastructure.database.unit_of_work import make_uow_factory


# Authentication
async def get_current_user_id(
    x_user_id: Annotated[Optional[str], Header(description="Authenticated user id")] = None,
) -> str:
    """
    Resolve the caller's user id.

    Session handling lives in front of this service; it forwards the
    authenticated user as the X-User-ID header.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id.strip()


# Storage dependencies
def get_uow_factory() -> UnitOfWorkFactory:
    """Get a factory producing units of work bound to the database."""
    return make_uow_factory(db_manager.sessionmaker)


# External client dependencies
@lru_cache
def get_category_client() -> CategoryLookupClient:
    """Get the shared CategoryLookupClient instance."""
    return HttpCategoryClient()


@lru_cache
def get_posting_engine() -> PostingEngine:
    """Get the shared PostingEngine instance."""
    return PostingEngine()


# Service dependencies
async def get_account_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
) -> AccountService:
    return AccountService(uow_factory)


async def get_transaction_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
    engine: Annotated[PostingEngine, Depends(get_posting_engine)],
) -> TransactionService:
    return TransactionService(uow_factory, engine)


async def get_installment_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
    engine: Annotated[PostingEngine, Depends(get_posting_engine)],
) -> InstallmentService:
    return InstallmentService(uow_factory, engine)


async def get_statement_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
    category_client: Annotated[CategoryLookupClient, Depends(get_category_client)],
) -> StatementService:
    return StatementService(uow_factory, category_client)


async def get_payment_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
    engine: Annotated[PostingEngine, Depends(get_posting_engine)],
) -> PaymentService:
    return PaymentService(uow_factory, engine)


async def get_snapshot_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
) -> SnapshotService:
    return SnapshotService(uow_factory)


async def get_recurring_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
    engine: Annotated[PostingEngine, Depends(get_posting_engine)],
) -> RecurringService:
    return RecurringService(uow_factory, engine)


async def get_planning_service(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
) -> PlanningService:
    return PlanningService(uow_factory)


CurrentUser = Annotated[str, Depends(get_current_user_id)]
