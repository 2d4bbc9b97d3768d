"""Payment service - credit-card statement and installment payments."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

import structlog

from src.application.dto import (
    MsiPaymentResult,
    PostTransactionRequest,
    RevertResult,
    StatementPaymentResult,
)
from src.core.metrics import record_card_payment
from src.domain.entities import TransactionType
from src.domain.exceptions import (
    AccountNotFoundException,
    InstallmentAlreadyPaidException,
    InstallmentNotFoundException,
    InsufficientFundsException,
    NoBalanceDueException,
    RevertNotAllowedException,
    TransactionNotFoundException,
)
from src.domain.interfaces import UnitOfWorkFactory
from src.service.billing import (
    BillingSettings,
    attribute_installments,
    billing_settings,
    get_billing_cycle,
    to_money,
)

from .posting_engine import PostingEngine
from .statement_service import get_credit_account

logger = structlog.get_logger(__name__)


class PaymentService:
    """
    Application service for credit-card payment use cases.

    A payment is split into one transfer per installment charge due in the
    cycle plus one transfer for all regular charges, so each installment
    plan keeps track of its own progress. Everything happens in a single
    unit of work.
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

    async def pay_full_statement(
        self,
        user_id: str,
        account_id: UUID,
        source_account_id: UUID,
        date: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> StatementPaymentResult:
        """
        Pay everything charged in the card's current cycle.

        Args:
            user_id: Owner of both accounts
            account_id: The credit card being paid
            source_account_id: Account the money comes from
            date: Date recorded on the payment transactions, defaults to now
            now: Reference instant for the billing cycle, defaults to now

        Returns:
            StatementPaymentResult with the total paid and the transactions created

        Raises:
            NoBalanceDueException: Nothing is charged in the current cycle
            InsufficientFundsException: The source account cannot cover the total
        """
        now = now or datetime.now()
        paid_on = date or now

        async with self._uow_factory() as uow:
            account = await get_credit_account(uow, user_id, account_id)
            source = await uow.accounts.get(source_account_id, user_id=user_id)
            if source is None:
                raise AccountNotFoundException(str(source_account_id))

            cycle = get_billing_cycle(account.cutoff_day, account.payment_day, now)
            purchases = await uow.installments.list_by_account(account.id, unpaid_only=True)
            msi_due = attribute_installments(purchases, cycle.cycle_start_date, cycle.cutoff_date)
            regular = await uow.transactions.list_regular_expenses(
                account.id,
                cycle.cycle_start_date,
                cycle.cutoff_date,
            )

            msi_total = to_money(sum((c.amount for c in msi_due), Decimal("0")))
            regular_total = to_money(sum((t.amount for t in regular), Decimal("0")))
            total = msi_total + regular_total

            if total <= 0:
                raise NoBalanceDueException(str(account.id))
            if source.balance < total:
                raise InsufficientFundsException(source.name, source.balance, total)

            cutoff_label = cycle.cutoff_date.strftime("%d %b")
            transaction_ids: List[str] = []

            for charge in msi_due:
                transaction = await self._engine.post(
                    uow,
                    PostTransactionRequest(
                        user_id=user_id,
                        amount=charge.amount,
                        type=TransactionType.TRANSFER,
                        account_id=source.id,
                        destination_account_id=account.id,
                        description=(
                            f"Statement payment {cutoff_label}: {charge.description} "
                            f"({charge.installment_number}/{charge.total_installments})"
                        ),
                        date=paid_on,
                        installment_purchase_id=charge.purchase_id,
                    ),
                )
                transaction_ids.append(str(transaction.id))

            if regular_total > 0:
                transaction = await self._engine.post(
                    uow,
                    PostTransactionRequest(
                        user_id=user_id,
                        amount=regular_total,
                        type=TransactionType.TRANSFER,
                        account_id=source.id,
                        destination_account_id=account.id,
                        description=f"Statement payment {cutoff_label}: {account.name} charges",
                        date=paid_on,
                    ),
                )
                transaction_ids.append(str(transaction.id))

        breakdown = ", ".join(
            f"{c.description} ({c.installment_number}/{c.total_installments})" for c in msi_due
        )
        description = f"Statement payment {account.name} - {cutoff_label}"
        if breakdown:
            description += f" | MSI: {breakdown}"
        if regular_total > 0:
            description += f" | Charges: {regular_total}"

        record_card_payment("statement")
        logger.info(
            "statement_paid",
            user_id=user_id,
            account_id=str(account.id),
            source_account_id=str(source.id),
            amount=str(total),
            msi_paid=len(msi_due),
            transactions_created=len(transaction_ids),
        )
        return StatementPaymentResult(
            amount=total,
            description=description,
            msi_paid=len(msi_due),
            regular_paid=1 if regular_total > 0 else 0,
            transactions_created=len(transaction_ids),
            transaction_ids=transaction_ids,
        )

    async def pay_msi_installment(
        self,
        user_id: str,
        installment_id: UUID,
        source_account_id: UUID,
        date: Optional[datetime] = None,
    ) -> MsiPaymentResult:
        """
        Pay exactly one monthly payment of an installment plan.

        Raises:
            InstallmentNotFoundException: If the plan is missing or not owned by the user
            InstallmentAlreadyPaidException: If nothing is left to pay
            InsufficientFundsException: If the source account cannot cover the payment
        """
        async with self._uow_factory() as uow:
            installment = await uow.installments.get(installment_id, user_id=user_id)
            if installment is None:
                raise InstallmentNotFoundException(str(installment_id))
            if installment.is_settled(self._settings.settlement_epsilon):
                raise InstallmentAlreadyPaidException(str(installment_id))

            source = await uow.accounts.get(source_account_id, user_id=user_id)
            if source is None:
                raise AccountNotFoundException(str(source_account_id))

            amount = installment.monthly_payment
            if source.balance < amount:
                raise InsufficientFundsException(source.name, source.balance, amount)

            installment_number = installment.paid_installments + 1
            description = (
                f"MSI payment: {installment.description} "
                f"({installment_number}/{installment.installments})"
            )
            transaction = await self._engine.post(
                uow,
                PostTransactionRequest(
                    user_id=user_id,
                    amount=amount,
                    type=TransactionType.TRANSFER,
                    account_id=source.id,
                    destination_account_id=installment.account_id,
                    description=description,
                    date=date,
                    installment_purchase_id=installment.id,
                ),
            )
            installment = await uow.installments.get(installment_id)

        record_card_payment("msi")
        logger.info(
            "msi_installment_paid",
            user_id=user_id,
            installment_id=str(installment_id),
            installment_number=installment_number,
            amount=str(amount),
        )
        return MsiPaymentResult(
            transaction_id=str(transaction.id),
            amount=amount,
            description=description,
            installment_number=installment_number,
            total_installments=installment.installments,
            remaining_amount=max(Decimal("0.00"), installment.remaining_amount),
        )

    async def revert_statement_payment(self, user_id: str, transaction_id: UUID) -> RevertResult:
        """
        Undo a card payment.

        Balances of both accounts are restored, progress on a linked
        installment plan is rolled back, and the payment is soft-deleted.

        Raises:
            TransactionNotFoundException: If missing, deleted or not owned by the user
            RevertNotAllowedException: If it is not a transfer into a credit card
        """
        async with self._uow_factory() as uow:
            transaction = await uow.transactions.get(transaction_id, user_id=user_id)
            if transaction is None or transaction.is_deleted:
                raise TransactionNotFoundException(str(transaction_id))
            if not transaction.is_transfer or transaction.destination_account_id is None:
                raise RevertNotAllowedException("Only transfers into a credit card can be reverted")

            destination = await uow.accounts.get(transaction.destination_account_id)
            if destination is None or not destination.is_credit:
                raise RevertNotAllowedException("This is not a credit card payment")

            await self._engine.reverse(uow, transaction, revert_installment=True)

        record_card_payment("revert")
        logger.info(
            "statement_payment_reverted",
            user_id=user_id,
            transaction_id=str(transaction_id),
            amount=str(transaction.amount),
        )
        return RevertResult(
            transaction_id=str(transaction_id),
            amount_reverted=transaction.amount,
        )
