"""PostgreSQL implementation of TransactionRepository."""

from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Transaction, TransactionType
from src.domain.interfaces import TransactionRepository
from src.infrastructure.database.models import TransactionModel
from src.service.billing.money import to_money


def _optional_uuid(value: Optional[str]) -> Optional[UUID]:
    return UUID(value) if value else None


def _optional_str(value: Optional[UUID]) -> Optional[str]:
    return str(value) if value else None


class PostgresTransactionRepository(TransactionRepository):
    """PostgreSQL implementation of the Transaction repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, transaction: Transaction) -> Transaction:
        """Persist a transaction to the database."""
        model = TransactionModel(
            id=str(transaction.id),
            user_id=transaction.user_id,
            amount=to_money(transaction.amount),
            description=transaction.description,
            date=transaction.date,
            type=transaction.type.value,
            account_id=str(transaction.account_id),
            destination_account_id=_optional_str(transaction.destination_account_id),
            category_id=transaction.category_id,
            installment_purchase_id=_optional_str(transaction.installment_purchase_id),
            recurring_transaction_id=_optional_str(transaction.recurring_transaction_id),
            statement_id=_optional_str(transaction.statement_id),
            affects_balance=transaction.affects_balance,
            deleted_at=transaction.deleted_at,
            created_at=transaction.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return transaction

    async def get(
        self,
        transaction_id: UUID,
        user_id: Optional[str] = None,
    ) -> Optional[Transaction]:
        stmt = select(TransactionModel).where(TransactionModel.id == str(transaction_id))
        if user_id is not None:
            stmt = stmt.where(TransactionModel.user_id == user_id)
        stmt = stmt.execution_options(populate_existing=True)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_by_user(
        self,
        user_id: str,
        account_id: Optional[UUID] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Transaction]:
        stmt = select(TransactionModel).where(
            TransactionModel.user_id == user_id,
            TransactionModel.deleted_at.is_(None),
        )
        if account_id is not None:
            key = str(account_id)
            stmt = stmt.where(
                or_(
                    TransactionModel.account_id == key,
                    TransactionModel.destination_account_id == key,
                )
            )
        stmt = (
            stmt.order_by(TransactionModel.date.desc(), TransactionModel.created_at.desc())
            .execution_options(populate_existing=True)
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_by_installment(self, installment_id: UUID) -> List[Transaction]:
        stmt = (
            select(TransactionModel)
            .where(
                TransactionModel.installment_purchase_id == str(installment_id),
                TransactionModel.deleted_at.is_(None),
            )
            .order_by(TransactionModel.date, TransactionModel.created_at)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_all_by_installment(self, installment_id: UUID) -> List[Transaction]:
        stmt = (
            select(TransactionModel)
            .where(TransactionModel.installment_purchase_id == str(installment_id))
            .order_by(TransactionModel.date, TransactionModel.created_at)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_by_recurring(self, recurring_id: UUID) -> List[Transaction]:
        stmt = (
            select(TransactionModel)
            .where(
                TransactionModel.recurring_transaction_id == str(recurring_id),
                TransactionModel.deleted_at.is_(None),
            )
            .order_by(TransactionModel.date)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_regular_expenses(
        self,
        account_id: UUID,
        start: Optional[datetime],
        end: datetime,
        unbilled_only: bool = False,
    ) -> List[Transaction]:
        stmt = select(TransactionModel).where(
            TransactionModel.account_id == str(account_id),
            TransactionModel.type == TransactionType.EXPENSE.value,
            TransactionModel.installment_purchase_id.is_(None),
            TransactionModel.deleted_at.is_(None),
            TransactionModel.date <= end,
        )
        if start is not None:
            stmt = stmt.where(TransactionModel.date >= start)
        if unbilled_only:
            stmt = stmt.where(TransactionModel.statement_id.is_(None))
        stmt = stmt.order_by(TransactionModel.date.desc()).execution_options(
            populate_existing=True
        )

        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_incoming_transfers(
        self,
        account_id: UUID,
        start: datetime,
        end: datetime,
    ) -> List[Transaction]:
        stmt = (
            select(TransactionModel)
            .where(
                TransactionModel.destination_account_id == str(account_id),
                TransactionModel.type == TransactionType.TRANSFER.value,
                TransactionModel.deleted_at.is_(None),
                TransactionModel.date >= start,
                TransactionModel.date <= end,
            )
            .order_by(TransactionModel.date.desc())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def link_to_statement(
        self,
        transaction_ids: Iterable[UUID],
        statement_id: UUID,
    ) -> int:
        ids = [str(transaction_id) for transaction_id in transaction_ids]
        if not ids:
            return 0
        stmt = (
            update(TransactionModel)
            .where(TransactionModel.id.in_(ids))
            .values(statement_id=str(statement_id))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def update(self, transaction: Transaction) -> Transaction:
        stmt = (
            update(TransactionModel)
            .where(TransactionModel.id == str(transaction.id))
            .values(
                statement_id=_optional_str(transaction.statement_id),
                deleted_at=transaction.deleted_at,
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
        return transaction

    async def delete_many(self, transaction_ids: Iterable[UUID]) -> None:
        ids = [str(transaction_id) for transaction_id in transaction_ids]
        if ids:
            await self._session.execute(
                delete(TransactionModel).where(TransactionModel.id.in_(ids))
            )

    def _to_entity(self, model: TransactionModel) -> Transaction:
        """Convert database model to domain entity."""
        return Transaction(
            id=UUID(model.id),
            user_id=model.user_id,
            amount=to_money(model.amount),
            description=model.description,
            date=model.date,
            type=TransactionType(model.type),
            account_id=UUID(model.account_id),
            destination_account_id=_optional_uuid(model.destination_account_id),
            category_id=model.category_id,
            installment_purchase_id=_optional_uuid(model.installment_purchase_id),
            recurring_transaction_id=_optional_uuid(model.recurring_transaction_id),
            statement_id=_optional_uuid(model.statement_id),
            affects_balance=model.affects_balance,
            deleted_at=model.deleted_at,
            created_at=model.created_at,
        )
