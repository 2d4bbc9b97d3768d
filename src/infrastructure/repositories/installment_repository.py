"""PostgreSQL implementation of InstallmentRepository."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, distinct, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import InstallmentPurchase
from src.domain.interfaces import InstallmentRepository
from src.infrastructure.database.models import InstallmentPurchaseModel
from src.service.billing.money import to_money


class PostgresInstallmentRepository(InstallmentRepository):
    """PostgreSQL implementation of the InstallmentPurchase repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, installment: InstallmentPurchase) -> InstallmentPurchase:
        """Persist an installment plan to the database."""
        model = InstallmentPurchaseModel(
            id=str(installment.id),
            user_id=installment.user_id,
            account_id=str(installment.account_id),
            description=installment.description,
            total_amount=to_money(installment.total_amount),
            installments=installment.installments,
            monthly_payment=to_money(installment.monthly_payment),
            purchase_date=installment.purchase_date,
            category_id=installment.category_id,
            paid_installments=installment.paid_installments,
            paid_amount=to_money(installment.paid_amount),
            billed_installments=installment.billed_installments,
            created_at=installment.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return installment

    async def get(
        self,
        installment_id: UUID,
        user_id: Optional[str] = None,
        for_update: bool = False,
    ) -> Optional[InstallmentPurchase]:
        stmt = select(InstallmentPurchaseModel).where(
            InstallmentPurchaseModel.id == str(installment_id)
        )
        if user_id is not None:
            stmt = stmt.where(InstallmentPurchaseModel.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        stmt = stmt.execution_options(populate_existing=True)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_by_user(self, user_id: str) -> List[InstallmentPurchase]:
        stmt = (
            select(InstallmentPurchaseModel)
            .where(InstallmentPurchaseModel.user_id == user_id)
            .order_by(InstallmentPurchaseModel.purchase_date.desc())
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_by_account(
        self,
        account_id: UUID,
        unpaid_only: bool = True,
    ) -> List[InstallmentPurchase]:
        stmt = select(InstallmentPurchaseModel).where(
            InstallmentPurchaseModel.account_id == str(account_id)
        )
        if unpaid_only:
            stmt = stmt.where(
                InstallmentPurchaseModel.paid_amount < InstallmentPurchaseModel.total_amount
            )
        stmt = stmt.order_by(InstallmentPurchaseModel.purchase_date).execution_options(
            populate_existing=True
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_user_ids_with_open_plans(self) -> List[str]:
        stmt = (
            select(distinct(InstallmentPurchaseModel.user_id))
            .where(InstallmentPurchaseModel.paid_amount < InstallmentPurchaseModel.total_amount)
            .order_by(InstallmentPurchaseModel.user_id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, installment: InstallmentPurchase) -> InstallmentPurchase:
        stmt = (
            update(InstallmentPurchaseModel)
            .where(InstallmentPurchaseModel.id == str(installment.id))
            .values(
                paid_installments=installment.paid_installments,
                paid_amount=to_money(installment.paid_amount),
                billed_installments=installment.billed_installments,
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
        return installment

    async def delete(self, installment_id: UUID) -> None:
        await self._session.execute(
            delete(InstallmentPurchaseModel).where(
                InstallmentPurchaseModel.id == str(installment_id)
            )
        )

    def _to_entity(self, model: InstallmentPurchaseModel) -> InstallmentPurchase:
        """Convert database model to domain entity."""
        return InstallmentPurchase(
            id=UUID(model.id),
            user_id=model.user_id,
            account_id=UUID(model.account_id),
            description=model.description,
            total_amount=to_money(model.total_amount),
            installments=model.installments,
            monthly_payment=to_money(model.monthly_payment),
            purchase_date=model.purchase_date,
            category_id=model.category_id,
            paid_installments=model.paid_installments,
            paid_amount=to_money(model.paid_amount),
            billed_installments=model.billed_installments,
            created_at=model.created_at,
        )
