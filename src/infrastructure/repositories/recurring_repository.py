"""PostgreSQL implementation of RecurringTransactionRepository."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Frequency, RecurringTransaction, TransactionType
from src.domain.interfaces import RecurringTransactionRepository
from src.infrastructure.database.models import RecurringTransactionModel
from src.service.billing.money import to_money


class PostgresRecurringTransactionRepository(RecurringTransactionRepository):
    """PostgreSQL implementation of the RecurringTransaction repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, recurring: RecurringTransaction) -> RecurringTransaction:
        """Persist a recurring schedule to the database."""
        model = RecurringTransactionModel(
            id=str(recurring.id),
            user_id=recurring.user_id,
            account_id=str(recurring.account_id),
            description=recurring.description,
            amount=to_money(recurring.amount),
            type=recurring.type.value,
            frequency=recurring.frequency.value,
            next_due_date=recurring.next_due_date,
            category_id=recurring.category_id,
            is_active=recurring.is_active,
            last_run=recurring.last_run,
            created_at=recurring.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return recurring

    async def get(
        self,
        recurring_id: UUID,
        user_id: Optional[str] = None,
        for_update: bool = False,
    ) -> Optional[RecurringTransaction]:
        stmt = select(RecurringTransactionModel).where(
            RecurringTransactionModel.id == str(recurring_id)
        )
        if user_id is not None:
            stmt = stmt.where(RecurringTransactionModel.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        stmt = stmt.execution_options(populate_existing=True)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_by_user(
        self,
        user_id: str,
        active_only: bool = True,
    ) -> List[RecurringTransaction]:
        stmt = select(RecurringTransactionModel).where(
            RecurringTransactionModel.user_id == user_id
        )
        if active_only:
            stmt = stmt.where(RecurringTransactionModel.is_active.is_(True))
        stmt = stmt.order_by(RecurringTransactionModel.next_due_date).execution_options(
            populate_existing=True
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_due(
        self,
        until: datetime,
        user_id: Optional[str] = None,
    ) -> List[RecurringTransaction]:
        stmt = select(RecurringTransactionModel).where(
            RecurringTransactionModel.is_active.is_(True),
            RecurringTransactionModel.next_due_date <= until,
        )
        if user_id is not None:
            stmt = stmt.where(RecurringTransactionModel.user_id == user_id)
        stmt = stmt.order_by(RecurringTransactionModel.next_due_date).execution_options(
            populate_existing=True
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def update(self, recurring: RecurringTransaction) -> RecurringTransaction:
        stmt = (
            update(RecurringTransactionModel)
            .where(RecurringTransactionModel.id == str(recurring.id))
            .values(
                description=recurring.description,
                amount=to_money(recurring.amount),
                frequency=recurring.frequency.value,
                next_due_date=recurring.next_due_date,
                category_id=recurring.category_id,
                is_active=recurring.is_active,
                last_run=recurring.last_run,
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
        return recurring

    def _to_entity(self, model: RecurringTransactionModel) -> RecurringTransaction:
        """Convert database model to domain entity."""
        return RecurringTransaction(
            id=UUID(model.id),
            user_id=model.user_id,
            account_id=UUID(model.account_id),
            description=model.description,
            amount=to_money(model.amount),
            type=TransactionType(model.type),
            frequency=Frequency(model.frequency),
            next_due_date=model.next_due_date,
            category_id=model.category_id,
            is_active=model.is_active,
            last_run=model.last_run,
            created_at=model.created_at,
        )
