"""
Scheduled jobs.

Each runner opens its own database engine, runs one job and disposes of
the engine, so it can be invoked from cron or any task scheduler.
"""

from datetime import datetime
from typing import Iterable, Optional

from src.application.dto import (
    InstallmentRunResult,
    RecurringRunResult,
    SnapshotRunResult,
    StatementRunResult,
)
from src.application.services import (
    InstallmentService,
    PostingEngine,
    RecurringService,
    SnapshotService,
    StatementService,
)
from src.infrastructure.clients import HttpCategoryClient
from src.infrastructure.database import db_manager
from src.infrastructure.database.unit_of_work import make_uow_factory


async def run_statements(today: Optional[datetime] = None) -> StatementRunResult:
    """Freeze statements for every card cutting today and flag overdue ones."""
    db_manager.init()
    try:
        service = StatementService(make_uow_factory(db_manager.sessionmaker), HttpCategoryClient())
        return await service.generate_statements(today)
    finally:
        await db_manager.close()


async def run_snapshots(today: Optional[datetime] = None) -> SnapshotRunResult:
    """Record today's balance of every active account."""
    db_manager.init()
    try:
        service = SnapshotService(make_uow_factory(db_manager.sessionmaker))
        return await service.create_daily_snapshots(today.date() if today else None)
    finally:
        await db_manager.close()


async def run_installments(
    user_ids: Optional[Iterable[str]] = None,
    now: Optional[datetime] = None,
) -> InstallmentRunResult:
    """Record due installment charges, for every user with an open plan by default."""
    db_manager.init()
    try:
        service = InstallmentService(make_uow_factory(db_manager.sessionmaker), PostingEngine())
        return await service.process_all_installment_purchases(user_ids, now)
    finally:
        await db_manager.close()


async def run_recurring(now: Optional[datetime] = None) -> RecurringRunResult:
    """Post every recurring occurrence due by the end of the day, for every user."""
    db_manager.init()
    try:
        service = RecurringService(make_uow_factory(db_manager.sessionmaker), PostingEngine())
        return await service.process_recurring_transactions(now=now)
    finally:
        await db_manager.close()


__all__ = ["run_statements", "run_snapshots", "run_installments", "run_recurring"]
