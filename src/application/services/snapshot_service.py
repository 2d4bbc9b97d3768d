"""Snapshot service - nightly balance snapshots and history queries."""

from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

import structlog

from src.application.dto import BalancePoint, NetWorthPoint, SnapshotRunResult
from src.core.metrics import record_snapshot, track_job_duration
from src.domain.entities import AccountSnapshot, AccountType
from src.domain.exceptions import AccountNotFoundException
from src.domain.interfaces import UnitOfWorkFactory

logger = structlog.get_logger(__name__)


class SnapshotService:
    """
    Application service for balance history.

    One snapshot per account and day makes historical balance and net
    worth queries a lookup instead of a replay of the ledger.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    async def create_daily_snapshots(self, today: Optional[date] = None) -> SnapshotRunResult:
        """
        Store today's balance of every active account.

        Re-running on the same day overwrites changed balances and skips
        accounts whose snapshot is already current.

        Returns:
            SnapshotRunResult with created, skipped and error counts
        """
        today = today or datetime.now().date()
        created = skipped = errors = 0

        with track_job_duration("snapshots"):
            async with self._uow_factory() as uow:
                accounts = await uow.accounts.list_active()

            for account in accounts:
                try:
                    async with self._uow_factory() as uow:
                        existing = await uow.snapshots.get(account.id, today)
                        if existing is not None and existing.balance == account.balance:
                            skipped += 1
                            record_snapshot("skipped")
                            continue
                        await uow.snapshots.save(
                            AccountSnapshot(
                                account_id=account.id,
                                user_id=account.user_id,
                                date=today,
                                balance=account.balance,
                            )
                        )
                except Exception as e:
                    errors += 1
                    record_snapshot("error")
                    logger.exception(
                        "snapshot_failed",
                        account_id=str(account.id),
                        error=str(e),
                    )
                    continue
                created += 1
                record_snapshot("created")

        logger.info(
            "snapshots_completed",
            date=today.isoformat(),
            created=created,
            skipped=skipped,
            errors=errors,
        )
        return SnapshotRunResult(created=created, skipped=skipped, errors=errors)

    async def get_balance_history(
        self,
        user_id: str,
        account_id: UUID,
        days: int = 30,
    ) -> List[BalancePoint]:
        """Daily balances of one account over the last ``days`` days, oldest first."""
        since = datetime.now().date() - timedelta(days=days)
        async with self._uow_factory() as uow:
            account = await uow.accounts.get(account_id, user_id=user_id)
            if account is None:
                raise AccountNotFoundException(str(account_id))
            snapshots = await uow.snapshots.list_by_account(account_id, since)
        return [BalancePoint(date=s.date, balance=s.balance) for s in snapshots]

    async def get_net_worth_history(self, user_id: str, days: int = 30) -> List[NetWorthPoint]:
        """
        Daily net worth over the last ``days`` days, oldest first.

        Credit card balances are liabilities; every other account is an asset.
        """
        since = datetime.now().date() - timedelta(days=days)
        async with self._uow_factory() as uow:
            accounts = await uow.accounts.list_by_user(user_id, include_archived=True)
            snapshots = await uow.snapshots.list_by_user(user_id, since)

        types: Dict[UUID, AccountType] = {a.id: a.type for a in accounts}
        assets: Dict[date, Decimal] = defaultdict(lambda: Decimal("0.00"))
        liabilities: Dict[date, Decimal] = defaultdict(lambda: Decimal("0.00"))

        for snapshot in snapshots:
            if types.get(snapshot.account_id) == AccountType.CREDIT:
                liabilities[snapshot.date] += snapshot.balance
            else:
                assets[snapshot.date] += snapshot.balance

        return [
            NetWorthPoint(
                date=day,
                assets=assets[day],
                liabilities=liabilities[day],
                net_worth=assets[day] - liabilities[day],
            )
            for day in sorted(set(assets) | set(liabilities))
        ]
