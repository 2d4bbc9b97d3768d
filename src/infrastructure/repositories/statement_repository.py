"""PostgreSQL implementation of StatementRepository."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import CreditCardStatement, StatementStatus
from src.domain.exceptions import DuplicateStatementException
from src.domain.interfaces import StatementRepository
from src.infrastructure.database.models import CreditCardStatementModel
from src.service.billing.money import to_money

OPEN_STATUSES = (
    StatementStatus.PENDING.value,
    StatementStatus.PARTIAL.value,
    StatementStatus.OVERDUE.value,
)


class PostgresStatementRepository(StatementRepository):
    """PostgreSQL implementation of the CreditCardStatement repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, statement: CreditCardStatement) -> CreditCardStatement:
        """
        Persist a statement to the database.

        The (account_id, cycle_end) unique constraint turns a concurrent
        second insert into DuplicateStatementException.
        """
        model = CreditCardStatementModel(
            id=str(statement.id),
            account_id=str(statement.account_id),
            cycle_start=statement.cycle_start,
            cycle_end=statement.cycle_end,
            payment_due_date=statement.payment_due_date,
            regular_charges=to_money(statement.regular_charges),
            msi_amount=to_money(statement.msi_amount),
            total_due=to_money(statement.total_due),
            minimum_payment=to_money(statement.minimum_payment),
            paid_amount=to_money(statement.paid_amount),
            status=statement.status.value,
            created_at=statement.created_at,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise DuplicateStatementException(
                str(statement.account_id),
                statement.cycle_end.isoformat(),
            ) from e
        return statement

    async def get(
        self,
        statement_id: UUID,
        for_update: bool = False,
    ) -> Optional[CreditCardStatement]:
        stmt = select(CreditCardStatementModel).where(
            CreditCardStatementModel.id == str(statement_id)
        )
        if for_update:
            stmt = stmt.with_for_update()
        stmt = stmt.execution_options(populate_existing=True)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_cycle_end(
        self,
        account_id: UUID,
        cycle_end: datetime,
    ) -> Optional[CreditCardStatement]:
        stmt = select(CreditCardStatementModel).where(
            CreditCardStatementModel.account_id == str(account_id),
            CreditCardStatementModel.cycle_end == cycle_end,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_by_account(self, account_id: UUID) -> List[CreditCardStatement]:
        stmt = (
            select(CreditCardStatementModel)
            .where(CreditCardStatementModel.account_id == str(account_id))
            .order_by(CreditCardStatementModel.cycle_end.desc())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_open(
        self,
        account_id: UUID,
        for_update: bool = False,
    ) -> List[CreditCardStatement]:
        stmt = (
            select(CreditCardStatementModel)
            .where(
                CreditCardStatementModel.account_id == str(account_id),
                CreditCardStatementModel.status.in_(OPEN_STATUSES),
            )
            .order_by(CreditCardStatementModel.cycle_end)
        )
        if for_update:
            stmt = stmt.with_for_update()
        stmt = stmt.execution_options(populate_existing=True)

        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_past_due(self, today: datetime) -> List[CreditCardStatement]:
        stmt = (
            select(CreditCardStatementModel)
            .where(
                CreditCardStatementModel.status.in_(
                    (StatementStatus.PENDING.value, StatementStatus.PARTIAL.value)
                ),
                CreditCardStatementModel.payment_due_date < today,
            )
            .order_by(CreditCardStatementModel.payment_due_date)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def update(self, statement: CreditCardStatement) -> CreditCardStatement:
        stmt = (
            update(CreditCardStatementModel)
            .where(CreditCardStatementModel.id == str(statement.id))
            .values(
                paid_amount=to_money(statement.paid_amount),
                status=statement.status.value,
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
        return statement

    def _to_entity(self, model: CreditCardStatementModel) -> CreditCardStatement:
        """Convert database model to domain entity."""
        return CreditCardStatement(
            id=UUID(model.id),
            account_id=UUID(model.account_id),
            cycle_start=model.cycle_start,
            cycle_end=model.cycle_end,
            payment_due_date=model.payment_due_date,
            regular_charges=to_money(model.regular_charges),
            msi_amount=to_money(model.msi_amount),
            total_due=to_money(model.total_due),
            minimum_payment=to_money(model.minimum_payment),
            paid_amount=to_money(model.paid_amount),
            status=StatementStatus(model.status),
            created_at=model.created_at,
        )
