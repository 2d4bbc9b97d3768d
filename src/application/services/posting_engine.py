"""
Ledger posting engine - the single path through which balances change.

Every posting, reversal and installment charge runs inside a unit of work
supplied by the caller. The engine locks the rows it reads, validates, and
writes; it never commits. A raised exception therefore leaves nothing behind
once the caller's unit of work rolls back.
"""

import math
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional
from uuid import UUID

import structlog

from src.core.metrics import record_posting, track_posting_latency
from src.domain.entities import (
    Account,
    InstallmentPurchase,
    Transaction,
    TransactionType,
)
from src.domain.exceptions import (
    AccountNotFoundException,
    InstallmentAlreadyPaidException,
    InstallmentNotFoundException,
    InsufficientFundsException,
    OverpaymentRejectedException,
    RecurringTransactionNotFoundException,
    ValidationException,
)
from src.domain.interfaces import UnitOfWork
from src.application.dto import PostTransactionRequest
from src.service.billing import BillingSettings, billing_settings, statement_status, to_money

logger = structlog.get_logger(__name__)


def balance_deltas(
    tx_type: TransactionType,
    amount: Decimal,
    source: Account,
    destination: Optional[Account] = None,
) -> Dict[UUID, Decimal]:
    """
    Signed balance change per account for a movement.

    For CREDIT accounts the balance is debt: an expense adds to it, an
    income or an incoming transfer pays it down. The source of a transfer
    always decreases.
    """
    if tx_type == TransactionType.TRANSFER:
        incoming = -amount if destination.is_credit else amount
        return {source.id: -amount, destination.id: incoming}
    if tx_type == TransactionType.EXPENSE:
        return {source.id: amount if source.is_credit else -amount}
    return {source.id: -amount if source.is_credit else amount}


class PostingEngine:
    """
    Posts, reverses and records ledger movements.

    Stateless apart from its settings; a single instance is shared by the
    transaction, installment and payment services.
    """

    def __init__(self, settings: BillingSettings = billing_settings):
        self._settings = settings

    async def post(self, uow: UnitOfWork, request: PostTransactionRequest) -> Transaction:
        """
        Validate and post a movement, updating balances and installment progress.

        Args:
            uow: Open unit of work; the caller commits
            request: The movement to post

        Returns:
            The created transaction

        Raises:
            ValidationException: Malformed request
            AccountNotFoundException: Account missing or owned by another user
            InstallmentNotFoundException: Linked plan missing
            RecurringTransactionNotFoundException: Linked recurring schedule missing
            InsufficientFundsException: Cash or debit account cannot cover it
            OverpaymentRejectedException: Payment exceeds card debt or plan remainder
            InstallmentAlreadyPaidException: Linked plan has nothing left to pay
        """
        try:
            with track_posting_latency():
                transaction = await self._post(uow, request)
        except Exception:
            record_posting(request.type.value, posted=False)
            raise
        record_posting(request.type.value, posted=True)
        return transaction

    async def _post(self, uow: UnitOfWork, request: PostTransactionRequest) -> Transaction:
        errors = request.validate()
        if errors:
            raise ValidationException("; ".join(errors))

        amount = to_money(request.amount)
        is_transfer = request.type == TransactionType.TRANSFER

        account_ids = [request.account_id]
        if is_transfer:
            account_ids.append(request.destination_account_id)
        accounts = await uow.accounts.lock(account_ids)

        source = self._owned(accounts, request.account_id, request.user_id)
        destination = (
            self._owned(accounts, request.destination_account_id, request.user_id)
            if is_transfer
            else None
        )

        installment = None
        if request.installment_purchase_id is not None:
            installment = await uow.installments.get(
                request.installment_purchase_id,
                user_id=request.user_id,
                for_update=True,
            )
            if installment is None:
                raise InstallmentNotFoundException(str(request.installment_purchase_id))

        if request.recurring_transaction_id is not None:
            recurring = await uow.recurring.get(
                request.recurring_transaction_id,
                user_id=request.user_id,
            )
            if recurring is None:
                raise RecurringTransactionNotFoundException(str(request.recurring_transaction_id))

        self._check_funds(request.type, amount, source, destination)

        target = destination if is_transfer else source
        is_payment = request.type in (TransactionType.INCOME, TransactionType.TRANSFER)
        if installment is not None and is_payment and installment.account_id == target.id:
            self._apply_installment_payment(installment, amount)
            await uow.installments.update(installment)

        transaction = Transaction(
            user_id=request.user_id,
            amount=amount,
            description=request.description,
            date=request.date or datetime.now(),
            type=request.type,
            account_id=source.id,
            destination_account_id=destination.id if is_transfer else None,
            category_id=None if is_transfer else request.category_id,
            installment_purchase_id=request.installment_purchase_id,
            recurring_transaction_id=request.recurring_transaction_id,
        )

        if is_payment and target.is_credit:
            statement = await self._apply_statement_payment(uow, target.id, amount, transaction.date)
            if statement is not None:
                transaction.statement_id = statement.id

        await uow.transactions.add(transaction)
        for account_id, delta in balance_deltas(request.type, amount, source, destination).items():
            await uow.accounts.adjust_balance(account_id, delta)

        logger.info(
            "transaction_posted",
            transaction_id=str(transaction.id),
            user_id=request.user_id,
            type=request.type.value,
            amount=str(amount),
            account_id=str(source.id),
            destination_account_id=str(destination.id) if destination else None,
            installment_purchase_id=(
                str(request.installment_purchase_id) if request.installment_purchase_id else None
            ),
        )
        return transaction

    async def reverse(
        self,
        uow: UnitOfWork,
        transaction: Transaction,
        revert_installment: bool = True,
    ) -> Transaction:
        """
        Undo a posted movement and soft-delete it.

        Balance effects are inverted (skipped for balance-neutral charges),
        a statement payment is taken back from the statement it was applied
        to and, when ``revert_installment`` is set, installment progress
        gained by a payment is removed.

        Args:
            uow: Open unit of work; the caller commits
            transaction: The movement to undo
            revert_installment: Also roll back installment payment progress

        Returns:
            The transaction, now marked deleted
        """
        if transaction.is_deleted:
            raise ValidationException(f"Transaction already reversed: {transaction.id}")

        account_ids = [transaction.account_id]
        if transaction.destination_account_id is not None:
            account_ids.append(transaction.destination_account_id)
        accounts = await uow.accounts.lock(account_ids)

        source = accounts.get(transaction.account_id)
        destination = accounts.get(transaction.destination_account_id)
        if source is None or (transaction.is_transfer and destination is None):
            raise AccountNotFoundException(str(transaction.account_id))

        if transaction.affects_balance:
            deltas = balance_deltas(transaction.type, transaction.amount, source, destination)
            for account_id, delta in deltas.items():
                await uow.accounts.adjust_balance(account_id, -delta)

        if transaction.is_payment:
            target = destination if transaction.is_transfer else source

            if revert_installment and transaction.installment_purchase_id is not None:
                installment = await uow.installments.get(
                    transaction.installment_purchase_id,
                    for_update=True,
                )
                if installment is not None and installment.account_id == target.id:
                    self._unapply_installment_payment(installment, transaction.amount)
                    await uow.installments.update(installment)

            if transaction.statement_id is not None:
                await self._unapply_statement_payment(
                    uow,
                    transaction.statement_id,
                    transaction.amount,
                )

        transaction.deleted_at = datetime.now()
        await uow.transactions.update(transaction)

        logger.info(
            "transaction_reversed",
            transaction_id=str(transaction.id),
            type=transaction.type.value,
            amount=str(transaction.amount),
            installment_reverted=revert_installment,
        )
        return transaction

    async def record_installment_charge(
        self,
        uow: UnitOfWork,
        installment: InstallmentPurchase,
        number: int,
        due_date: datetime,
    ) -> Transaction:
        """
        Record that installment ``number`` of a plan came due.

        The whole purchase was added to the card's debt when the plan was
        created, so the charge does not move any balance.
        """
        transaction = Transaction(
            user_id=installment.user_id,
            amount=installment.monthly_payment,
            description=f"{installment.description} ({number}/{installment.installments})",
            date=due_date,
            type=TransactionType.EXPENSE,
            account_id=installment.account_id,
            category_id=installment.category_id,
            installment_purchase_id=installment.id,
            affects_balance=False,
        )
        await uow.transactions.add(transaction)
        return transaction

    def _owned(self, accounts: Dict[UUID, Account], account_id: UUID, user_id: str) -> Account:
        account = accounts.get(account_id)
        if account is None or account.user_id != user_id:
            raise AccountNotFoundException(str(account_id))
        return account

    def _check_funds(
        self,
        tx_type: TransactionType,
        amount: Decimal,
        source: Account,
        destination: Optional[Account],
    ) -> None:
        if tx_type == TransactionType.INCOME:
            return

        if not source.is_credit and source.balance < amount:
            raise InsufficientFundsException(source.name, source.balance, amount)

        if tx_type == TransactionType.TRANSFER and destination.is_credit:
            if amount > destination.balance:
                raise OverpaymentRejectedException(
                    f"Payment of {amount} exceeds the debt of {destination.balance} "
                    f"on {destination.name}"
                )

    def _apply_installment_payment(self, installment: InstallmentPurchase, amount: Decimal) -> None:
        epsilon = self._settings.settlement_epsilon
        remaining = installment.remaining_amount

        if remaining <= epsilon:
            raise InstallmentAlreadyPaidException(str(installment.id))
        if amount > remaining + epsilon:
            raise OverpaymentRejectedException(
                f"Payment of {amount} exceeds the remaining {remaining} "
                f"of installment purchase {installment.description}"
            )

        installment.paid_amount = to_money(installment.paid_amount + amount)
        installment.paid_installments = min(
            installment.installments,
            installment.paid_installments + math.floor(amount / installment.monthly_payment),
        )

    def _unapply_installment_payment(self, installment: InstallmentPurchase, amount: Decimal) -> None:
        installment.paid_amount = max(Decimal("0.00"), to_money(installment.paid_amount - amount))
        installment.paid_installments = max(
            0,
            installment.paid_installments - math.floor(amount / installment.monthly_payment),
        )

    async def _apply_statement_payment(
        self,
        uow: UnitOfWork,
        account_id: UUID,
        amount: Decimal,
        paid_on: datetime,
    ):
        open_statements = await uow.statements.list_open(account_id, for_update=True)
        if not open_statements:
            return None

        statement = open_statements[0]
        statement.paid_amount = to_money(statement.paid_amount + amount)
        statement.status = statement_status(
            statement.total_due,
            statement.paid_amount,
            statement.payment_due_date,
            paid_on,
            self._settings,
        )
        await uow.statements.update(statement)
        logger.info(
            "statement_payment_applied",
            statement_id=str(statement.id),
            amount=str(amount),
            status=statement.status.value,
        )
        return statement

    async def _unapply_statement_payment(
        self,
        uow: UnitOfWork,
        statement_id: UUID,
        amount: Decimal,
    ) -> None:
        statement = await uow.statements.get(statement_id, for_update=True)
        if statement is None:
            return

        statement.paid_amount = max(Decimal("0.00"), to_money(statement.paid_amount - amount))
        statement.status = statement_status(
            statement.total_due,
            statement.paid_amount,
            statement.payment_due_date,
            datetime.now(),
            self._settings,
        )
        await uow.statements.update(statement)
