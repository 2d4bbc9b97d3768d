"""Installment service - lifecycle and progress tracking of MSI purchases."""

import math
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

import structlog

from src.application.dto import (
    CreateInstallmentRequest,
    InstallmentResponse,
    InstallmentRunResult,
    PostTransactionRequest,
)
from src.core.metrics import record_card_payment, track_job_duration
from src.domain.entities import InstallmentPurchase, TransactionType
from src.domain.exceptions import (
    AccountNotFoundException,
    InstallmentNotFoundException,
    ValidationException,
)
from src.domain.interfaces import UnitOfWork, UnitOfWorkFactory
from src.service.billing import BillingSettings, billing_settings, split_evenly, to_money
from src.service.billing.dates import add_months, end_of_day, months_between

from .posting_engine import PostingEngine

logger = structlog.get_logger(__name__)


def expected_installments(purchase: InstallmentPurchase, now: datetime) -> int:
    """
    Number of monthly charges that should have come due by ``now``.

    Counts calendar months since purchase, plus one once the purchase day
    of month has been reached, capped at the plan length.
    """
    elapsed = months_between(now, purchase.purchase_date)
    if now.day >= purchase.purchase_date.day:
        elapsed += 1
    return min(max(0, elapsed), purchase.installments)


class InstallmentService:
    """
    Application service for installment purchase use cases.

    Creation and deletion move card balances through the posting engine;
    payments are ordinary postings linked to the plan.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        engine: PostingEngine,
        settings: BillingSettings = billing_settings,
    ):
        self._uow_factory = uow_factory
        self._engine = engine
        self._settings = settings

    async def create_installment(self, request: CreateInstallmentRequest) -> InstallmentResponse:
        """
        Register an installment purchase and charge its total to the card.

        Raises:
            ValidationException: Invalid amounts, or the account is not a credit card
            AccountNotFoundException: If the card is missing or not owned by the user
        """
        errors = request.validate()
        if errors:
            raise ValidationException("; ".join(errors))

        total = to_money(request.total_amount)
        monthly = split_evenly(total, request.installments)
        if monthly <= 0:
            raise ValidationException("total_amount is too small for that many installments")

        async with self._uow_factory() as uow:
            account = await uow.accounts.get(request.account_id, user_id=request.user_id)
            if account is None:
                raise AccountNotFoundException(str(request.account_id))
            if not account.is_credit:
                raise ValidationException(
                    "Installment purchases can only be charged to credit accounts",
                    field="account_id",
                )

            installment = InstallmentPurchase(
                user_id=request.user_id,
                description=request.description.strip(),
                total_amount=total,
                installments=request.installments,
                monthly_payment=monthly,
                purchase_date=request.purchase_date,
                account_id=account.id,
                category_id=request.category_id,
            )
            await uow.installments.add(installment)

            await self._engine.post(
                uow,
                PostTransactionRequest(
                    user_id=request.user_id,
                    amount=total,
                    type=TransactionType.EXPENSE,
                    account_id=account.id,
                    description=f"{installment.description} ({installment.installments} MSI)",
                    date=request.purchase_date,
                    category_id=request.category_id,
                    installment_purchase_id=installment.id,
                ),
            )

        logger.info(
            "installment_created",
            installment_id=str(installment.id),
            user_id=request.user_id,
            total_amount=str(total),
            installments=installment.installments,
            monthly_payment=str(monthly),
        )
        return self._response(installment)

    async def list_installments(self, user_id: str) -> List[InstallmentResponse]:
        """
        List a user's plans, repairing progress counters that drifted.

        ``paid_amount`` and ``paid_installments`` are recomputed from the
        payments actually posted against each plan; any difference is
        written back.
        """
        async with self._uow_factory() as uow:
            installments = await uow.installments.list_by_user(user_id)
            for installment in installments:
                await self._reconcile(uow, installment)
        return [self._response(i) for i in installments]

    async def get_installment(self, user_id: str, installment_id: UUID) -> InstallmentResponse:
        async with self._uow_factory() as uow:
            installment = await uow.installments.get(installment_id, user_id=user_id)
        if installment is None:
            raise InstallmentNotFoundException(str(installment_id))
        return self._response(installment)

    async def pay_installment(
        self,
        user_id: str,
        installment_id: UUID,
        amount: Decimal,
        source_account_id: Optional[UUID] = None,
        date: Optional[datetime] = None,
    ) -> InstallmentResponse:
        """
        Pay an arbitrary amount toward a plan.

        Paid from another account it is a transfer into the card; without a
        source (or from the card itself) it is an income on the card.
        """
        async with self._uow_factory() as uow:
            installment = await uow.installments.get(installment_id, user_id=user_id)
            if installment is None:
                raise InstallmentNotFoundException(str(installment_id))

            from_card = source_account_id is None or source_account_id == installment.account_id
            request = PostTransactionRequest(
                user_id=user_id,
                amount=amount,
                type=TransactionType.INCOME if from_card else TransactionType.TRANSFER,
                account_id=installment.account_id if from_card else source_account_id,
                destination_account_id=None if from_card else installment.account_id,
                description=f"Installment payment: {installment.description}",
                date=date,
                installment_purchase_id=installment.id,
            )
            await self._engine.post(uow, request)
            installment = await uow.installments.get(installment_id)

        record_card_payment("installment")
        return self._response(installment)

    async def delete_installment(self, user_id: str, installment_id: UUID) -> None:
        """
        Delete a plan together with every transaction linked to it.

        The balance effect of each live linked transaction is reversed
        first, so the card and any paying account end where they would
        have been without the purchase.
        """
        async with self._uow_factory() as uow:
            installment = await uow.installments.get(installment_id, user_id=user_id, for_update=True)
            if installment is None:
                raise InstallmentNotFoundException(str(installment_id))

            linked = await uow.transactions.list_all_by_installment(installment_id)
            for transaction in linked:
                if not transaction.is_deleted:
                    await self._engine.reverse(uow, transaction, revert_installment=False)

            await uow.transactions.delete_many(t.id for t in linked)
            await uow.installments.delete(installment_id)

        logger.info(
            "installment_deleted",
            installment_id=str(installment_id),
            user_id=user_id,
            transactions_removed=len(linked),
        )

    async def process_installment_purchases(
        self,
        user_id: str,
        now: Optional[datetime] = None,
    ) -> int:
        """
        Record the monthly charges that came due and are missing.

        Safe to re-run: only the difference between the charges that should
        exist by ``now`` and those already recorded is created.

        Returns:
            Number of charges created
        """
        now = now or datetime.now()
        created = 0

        async with self._uow_factory() as uow:
            installments = await uow.installments.list_by_user(user_id)
            for listed in installments:
                if listed.purchase_date > now or listed.is_settled(self._settings.settlement_epsilon):
                    continue

                expected = expected_installments(listed, now)
                if expected <= listed.billed_installments:
                    continue

                installment = await uow.installments.get(listed.id, for_update=True)
                for number in range(installment.billed_installments + 1, expected + 1):
                    due_date = end_of_day(add_months(installment.purchase_date, number))
                    if due_date > now:
                        break
                    await self._engine.record_installment_charge(uow, installment, number, due_date)
                    installment.billed_installments = number
                    created += 1

                await uow.installments.update(installment)

        logger.info(
            "installment_charges_processed",
            user_id=user_id,
            charges_created=created,
        )
        return created

    async def process_all_installment_purchases(
        self,
        user_ids: Optional[Iterable[str]] = None,
        now: Optional[datetime] = None,
    ) -> InstallmentRunResult:
        """
        Run the tracker for several users, one unit of work each.

        Without ``user_ids`` every user owning a plan that is not paid off is
        processed. A failing user is logged and counted; the run carries on.
        """
        now = now or datetime.now()
        created = 0
        failed = 0

        with track_job_duration("installments"):
            if user_ids is None:
                async with self._uow_factory() as uow:
                    user_ids = await uow.installments.list_user_ids_with_open_plans()
            user_ids = list(user_ids)

            for user_id in user_ids:
                try:
                    created += await self.process_installment_purchases(user_id, now)
                except Exception as e:
                    failed += 1
                    logger.exception("installment_processing_failed", user_id=user_id, error=str(e))

        logger.info(
            "installment_tracking_completed",
            users=len(user_ids),
            charges_created=created,
            failed=failed,
        )
        return InstallmentRunResult(users=len(user_ids), charges_created=created, failed=failed)

    async def _reconcile(self, uow: UnitOfWork, installment: InstallmentPurchase) -> None:
        # Only payments into the plan's card count; the posting engine stores
        # the link without applying it when another account was the target.
        payments = [
            t
            for t in await uow.transactions.list_by_installment(installment.id)
            if t.is_payment and t.target_account_id == installment.account_id
        ]
        paid = to_money(sum((t.amount for t in payments), Decimal("0")))
        paid = min(paid, installment.total_amount)
        paid_installments = min(
            installment.installments,
            math.floor((paid + Decimal("0.01")) / installment.monthly_payment),
        )

        if paid == installment.paid_amount and paid_installments == installment.paid_installments:
            return

        logger.warning(
            "installment_progress_repaired",
            installment_id=str(installment.id),
            paid_amount_before=str(installment.paid_amount),
            paid_amount_after=str(paid),
            paid_installments_before=installment.paid_installments,
            paid_installments_after=paid_installments,
        )
        installment.paid_amount = paid
        installment.paid_installments = paid_installments
        await uow.installments.update(installment)

    def _response(self, installment: InstallmentPurchase) -> InstallmentResponse:
        return InstallmentResponse.from_entity(installment, self._settings.settlement_epsilon)
