"""PostgreSQL implementation of SnapshotRepository."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import AccountSnapshot
from src.domain.interfaces import SnapshotRepository
from src.infrastructure.database.models import AccountSnapshotModel
from src.service.billing.money import to_money


class PostgresSnapshotRepository(SnapshotRepository):
    """PostgreSQL implementation of the AccountSnapshot repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, account_id: UUID, day: date) -> Optional[AccountSnapshot]:
        stmt = (
            select(AccountSnapshotModel)
            .where(
                AccountSnapshotModel.account_id == str(account_id),
                AccountSnapshotModel.snapshot_date == day,
            )
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def save(self, snapshot: AccountSnapshot) -> AccountSnapshot:
        """Insert the snapshot or overwrite the balance of the same day."""
        existing = await self.get(snapshot.account_id, snapshot.date)
        if existing is not None:
            await self._session.execute(
                update(AccountSnapshotModel)
                .where(AccountSnapshotModel.id == str(existing.id))
                .values(balance=to_money(snapshot.balance))
                .execution_options(synchronize_session=False)
            )
            existing.balance = to_money(snapshot.balance)
            return existing

        model = AccountSnapshotModel(
            id=str(snapshot.id),
            account_id=str(snapshot.account_id),
            user_id=snapshot.user_id,
            snapshot_date=snapshot.date,
            balance=to_money(snapshot.balance),
            created_at=snapshot.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return snapshot

    async def list_by_account(
        self,
        account_id: UUID,
        since: date,
    ) -> List[AccountSnapshot]:
        stmt = (
            select(AccountSnapshotModel)
            .where(
                AccountSnapshotModel.account_id == str(account_id),
                AccountSnapshotModel.snapshot_date >= since,
            )
            .order_by(AccountSnapshotModel.snapshot_date)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_by_user(self, user_id: str, since: date) -> List[AccountSnapshot]:
        stmt = (
            select(AccountSnapshotModel)
            .where(
                AccountSnapshotModel.user_id == user_id,
                AccountSnapshotModel.snapshot_date >= since,
            )
            .order_by(AccountSnapshotModel.snapshot_date)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    def _to_entity(self, model: AccountSnapshotModel) -> AccountSnapshot:
        """Convert database model to domain entity."""
        return AccountSnapshot(
            id=UUID(model.id),
            account_id=UUID(model.account_id),
            user_id=model.user_id,
            date=model.snapshot_date,
            balance=to_money(model.balance),
            created_at=model.created_at,
        )
