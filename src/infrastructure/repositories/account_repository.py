"""PostgreSQL implementation of AccountRepository."""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete, exists, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Account, AccountType
from src.domain.interfaces import AccountRepository
from src.infrastructure.database.models import (
    AccountModel,
    CreditCardStatementModel,
    InstallmentPurchaseModel,
    RecurringTransactionModel,
    TransactionModel,
)
from src.service.billing.dates import is_last_day_of_month
from src.service.billing.money import to_money


class PostgresAccountRepository(AccountRepository):
    """
    PostgreSQL implementation of the Account repository.

    Reads always refresh already-loaded rows so that balances changed by a
    relative UPDATE in the same session are seen.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, account: Account) -> Account:
        """Persist an account to the database."""
        model = AccountModel(
            id=str(account.id),
            user_id=account.user_id,
            name=account.name,
            type=AccountType.normalize(account.type).value,
            balance=to_money(account.balance),
            credit_limit=account.credit_limit,
            cutoff_day=account.cutoff_day,
            payment_day=account.payment_day,
            is_archived=account.is_archived,
            created_at=account.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return account

    async def get(
        self,
        account_id: UUID,
        user_id: Optional[str] = None,
        for_update: bool = False,
    ) -> Optional[Account]:
        stmt = select(AccountModel).where(AccountModel.id == str(account_id))
        if user_id is not None:
            stmt = stmt.where(AccountModel.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        stmt = stmt.execution_options(populate_existing=True)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def lock(self, account_ids: Iterable[UUID]) -> Dict[UUID, Account]:
        ids = sorted({str(account_id) for account_id in account_ids})
        if not ids:
            return {}
        stmt = (
            select(AccountModel)
            .where(AccountModel.id.in_(ids))
            .order_by(AccountModel.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        accounts = [self._to_entity(model) for model in result.scalars().all()]
        return {account.id: account for account in accounts}

    async def list_by_user(
        self,
        user_id: str,
        include_archived: bool = False,
    ) -> List[Account]:
        stmt = select(AccountModel).where(AccountModel.user_id == user_id)
        if not include_archived:
            stmt = stmt.where(AccountModel.is_archived.is_(False))
        stmt = stmt.order_by(AccountModel.created_at)

        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_active(self) -> List[Account]:
        stmt = (
            select(AccountModel)
            .where(AccountModel.is_archived.is_(False))
            .order_by(AccountModel.user_id, AccountModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_credit_cutting_on(self, today: date) -> List[Account]:
        cuts_today = AccountModel.cutoff_day == today.day
        if is_last_day_of_month(today):
            cuts_today = or_(cuts_today, AccountModel.cutoff_day > today.day)

        stmt = (
            select(AccountModel)
            .where(
                AccountModel.type == AccountType.CREDIT.value,
                AccountModel.is_archived.is_(False),
                cuts_today,
            )
            .order_by(AccountModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def adjust_balance(self, account_id: UUID, delta: Decimal) -> None:
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == str(account_id))
            .values(balance=AccountModel.balance + to_money(delta))
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def update(self, account: Account) -> Account:
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == str(account.id))
            .values(
                name=account.name,
                credit_limit=account.credit_limit,
                cutoff_day=account.cutoff_day,
                payment_day=account.payment_day,
                is_archived=account.is_archived,
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
        return account

    async def delete(self, account_id: UUID) -> None:
        await self._session.execute(
            delete(AccountModel).where(AccountModel.id == str(account_id))
        )

    async def is_referenced(self, account_id: UUID) -> bool:
        key = str(account_id)
        stmt = select(
            or_(
                exists().where(
                    or_(
                        TransactionModel.account_id == key,
                        TransactionModel.destination_account_id == key,
                    )
                ),
                exists().where(InstallmentPurchaseModel.account_id == key),
                exists().where(CreditCardStatementModel.account_id == key),
                exists().where(RecurringTransactionModel.account_id == key),
            )
        )
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    def _to_entity(self, model: AccountModel) -> Account:
        """Convert database model to domain entity."""
        return Account(
            id=UUID(model.id),
            user_id=model.user_id,
            name=model.name,
            type=AccountType.normalize(model.type),
            balance=to_money(model.balance),
            credit_limit=to_money(model.credit_limit) if model.credit_limit is not None else None,
            cutoff_day=model.cutoff_day,
            payment_day=model.payment_day,
            is_archived=model.is_archived,
            created_at=model.created_at,
        )
