"""Statement service - live cycle view and the daily statement generator."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

import structlog

from src.application.dto import (
    BillingCycleDTO,
    MsiChargeDTO,
    PaymentDTO,
    RegularChargeDTO,
    StatementDetails,
    StatementResponse,
    StatementRunResult,
)
from src.core.metrics import record_statement, track_job_duration
from src.domain.entities import (
    Account,
    AuditAction,
    AuditLogEntry,
    CreditCardStatement,
    StatementStatus,
)
from src.domain.exceptions import (
    AccountNotFoundException,
    DuplicateStatementException,
    ValidationException,
)
from src.domain.interfaces import CategoryLookupClient, UnitOfWork, UnitOfWorkFactory
from src.service.billing import (
    BillingSettings,
    attribute_installments,
    billing_settings,
    flat_msi_amount,
    get_billing_cycle,
    minimum_payment,
    statement_status,
    statement_window,
    to_money,
)
from src.service.billing.dates import start_of_day

logger = structlog.get_logger(__name__)


async def get_credit_account(uow: UnitOfWork, user_id: str, account_id: UUID) -> Account:
    """
    Load a user's credit card with its cycle configured.

    Raises:
        AccountNotFoundException: Missing, not owned, or not a credit account
        ValidationException: Cutoff or payment day not configured
    """
    account = await uow.accounts.get(account_id, user_id=user_id)
    if account is None or not account.is_credit:
        raise AccountNotFoundException(str(account_id))
    if not account.cutoff_day or not account.payment_day:
        raise ValidationException(
            "Account is missing its cutoff/payment day configuration",
            field="cutoff_day",
        )
    return account


class StatementService:
    """
    Application service for statement use cases.

    The live view is computed from the current billing cycle; frozen
    statements are produced once per account and cutoff by the generator.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        category_client: CategoryLookupClient,
        settings: BillingSettings = billing_settings,
    ):
        self._uow_factory = uow_factory
        self._category_client = category_client
        self._settings = settings

    async def get_statement_details(
        self,
        user_id: str,
        account_id: UUID,
        now: Optional[datetime] = None,
    ) -> StatementDetails:
        """
        Describe what is owed on the card's current cycle.

        Args:
            user_id: Owner of the card
            account_id: The credit card
            now: Reference instant, defaults to now

        Returns:
            StatementDetails with cycle dates, installment and regular
            charges, totals and the payments already made this cycle
        """
        now = now or datetime.now()

        async with self._uow_factory() as uow:
            account = await get_credit_account(uow, user_id, account_id)
            cycle = get_billing_cycle(account.cutoff_day, account.payment_day, now)

            purchases = await uow.installments.list_by_account(account.id, unpaid_only=True)
            regular = await uow.transactions.list_regular_expenses(
                account.id,
                cycle.cycle_start_date,
                cycle.cutoff_date,
            )
            payments = await uow.transactions.list_incoming_transfers(
                account.id,
                cycle.cycle_start_date,
                now,
            )

        msi_charges = []
        for charge in attribute_installments(purchases, cycle.cycle_start_date, cycle.cutoff_date):
            category = await self._category_client.get_category(charge.category_id)
            msi_charges.append(
                MsiChargeDTO(
                    installment_id=str(charge.purchase_id),
                    description=charge.description,
                    amount=charge.amount,
                    current_installment=charge.installment_number,
                    total_installments=charge.total_installments,
                    remaining_amount=charge.remaining_amount,
                    paid_amount=charge.paid_amount,
                    category_name=category.name,
                    category_color=category.color,
                    category_icon=category.icon,
                )
            )

        regular_charges = []
        for transaction in regular:
            category = await self._category_client.get_category(transaction.category_id)
            regular_charges.append(
                RegularChargeDTO(
                    transaction_id=str(transaction.id),
                    description=transaction.description,
                    amount=transaction.amount,
                    date=transaction.date,
                    category_name=category.name,
                    category_color=category.color,
                    category_icon=category.icon,
                )
            )

        msi_total = to_money(sum((c.amount for c in msi_charges), Decimal("0")))
        regular_total = to_money(sum((c.amount for c in regular_charges), Decimal("0")))
        total_due = msi_total + regular_total
        total_paid = to_money(sum((p.amount for p in payments), Decimal("0")))
        remaining_due = max(Decimal("0.00"), total_due - total_paid)

        return StatementDetails(
            account_id=str(account.id),
            account_name=account.name,
            credit_limit=account.credit_limit,
            current_balance=abs(account.balance),
            billing_cycle=BillingCycleDTO.from_cycle(cycle),
            msi_charges=msi_charges,
            msi_total=msi_total,
            regular_charges=regular_charges,
            regular_total=regular_total,
            total_due=total_due,
            total_paid=total_paid,
            remaining_due=remaining_due,
            is_fully_paid=remaining_due <= self._settings.fully_paid_tolerance,
            payments=[
                PaymentDTO(
                    transaction_id=str(p.id),
                    amount=p.amount,
                    date=p.date,
                    description=p.description,
                )
                for p in payments
            ],
        )

    async def list_statements(self, user_id: str, account_id: UUID) -> List[StatementResponse]:
        """List the frozen statements of a card, most recent first."""
        async with self._uow_factory() as uow:
            account = await uow.accounts.get(account_id, user_id=user_id)
            if account is None or not account.is_credit:
                raise AccountNotFoundException(str(account_id))
            statements = await uow.statements.list_by_account(account.id)
        return [StatementResponse.from_entity(s) for s in statements]

    async def generate_statements(self, today: Optional[datetime] = None) -> StatementRunResult:
        """
        Freeze a statement for every credit card whose cutoff is today.

        Each account is handled in its own unit of work. A failing account
        is logged and counted; the run carries on with the next one. Running
        twice on the same day creates nothing the second time.

        Returns:
            StatementRunResult with the number of cards cutting today and
            the ids of the statements created
        """
        today = today or datetime.now()
        created: List[str] = []
        skipped = 0
        failed = 0

        with track_job_duration("statements"):
            async with self._uow_factory() as uow:
                accounts = await uow.accounts.list_credit_cutting_on(today.date())

            logger.info(
                "statement_generation_started",
                date=today.date().isoformat(),
                accounts=len(accounts),
            )

            for account in accounts:
                log = logger.bind(account_id=str(account.id), user_id=account.user_id)
                try:
                    statement = await self._generate_for_account(account.id, today)
                except DuplicateStatementException:
                    statement = None
                except Exception as e:
                    failed += 1
                    record_statement("failed")
                    log.exception("statement_generation_failed", error=str(e))
                    continue

                if statement is None:
                    skipped += 1
                    record_statement("skipped")
                    log.info("statement_already_exists")
                    continue

                created.append(str(statement.id))
                record_statement("generated")
                log.info(
                    "statement_generated",
                    statement_id=str(statement.id),
                    total_due=str(statement.total_due),
                    cycle_start=statement.cycle_start.isoformat(),
                    cycle_end=statement.cycle_end.isoformat(),
                )

            overdue = await self.mark_overdue(today)

        logger.info(
            "statement_generation_completed",
            processed=len(accounts),
            generated=len(created),
            skipped=skipped,
            failed=failed,
            overdue=overdue,
        )
        return StatementRunResult(
            processed=len(accounts),
            statements=created,
            skipped=skipped,
            failed=failed,
            overdue=overdue,
        )

    async def mark_overdue(self, today: Optional[datetime] = None) -> int:
        """
        Flag open statements whose payment due date has passed.

        Returns:
            Number of statements marked OVERDUE
        """
        today = start_of_day(today or datetime.now())
        marked = 0

        async with self._uow_factory() as uow:
            for statement in await uow.statements.list_past_due(today):
                status = statement_status(
                    statement.total_due,
                    statement.paid_amount,
                    statement.payment_due_date,
                    today,
                    self._settings,
                )
                if status != statement.status:
                    statement.status = status
                    await uow.statements.update(statement)
                    if status == StatementStatus.OVERDUE:
                        marked += 1
                        record_statement("overdue")

        return marked

    async def _generate_for_account(
        self,
        account_id: UUID,
        today: datetime,
    ) -> Optional[CreditCardStatement]:
        async with self._uow_factory() as uow:
            account = await uow.accounts.get(account_id, for_update=True)
            if account is None:
                raise AccountNotFoundException(str(account_id))

            window = statement_window(
                account.cutoff_day,
                account.payment_day,
                today,
                self._settings,
            )
            if await uow.statements.get_by_cycle_end(account.id, window.cycle_end) is not None:
                return None

            # Unbilled charges from earlier cycles roll into this one, including
            # those posted on the previous cutoff day after that run.
            expenses = await uow.transactions.list_regular_expenses(
                account.id,
                None,
                window.charges_until,
                unbilled_only=True,
            )
            purchases = await uow.installments.list_by_account(account.id, unpaid_only=False)

            regular_amount = to_money(sum((t.amount for t in expenses), Decimal("0")))
            msi_amount = flat_msi_amount(purchases)
            total_due = regular_amount + msi_amount

            statement = CreditCardStatement(
                account_id=account.id,
                cycle_start=window.cycle_start,
                cycle_end=window.cycle_end,
                payment_due_date=window.payment_due_date,
                regular_charges=regular_amount,
                msi_amount=msi_amount,
                total_due=total_due,
                minimum_payment=minimum_payment(total_due, self._settings),
            )
            await uow.statements.add(statement)
            await uow.transactions.link_to_statement((t.id for t in expenses), statement.id)

            await uow.audit_logs.add(
                AuditLogEntry(
                    action=AuditAction.CREATE,
                    entity_type="CreditCardStatement",
                    entity_id=str(statement.id),
                    user_id=account.user_id,
                    details={
                        "old_value": None,
                        "new_value": {
                            "account_id": str(account.id),
                            "cycle_start": statement.cycle_start.isoformat(),
                            "cycle_end": statement.cycle_end.isoformat(),
                            "payment_due_date": statement.payment_due_date.isoformat(),
                            "regular_charges": str(statement.regular_charges),
                            "msi_amount": str(statement.msi_amount),
                            "total_due": str(statement.total_due),
                            "minimum_payment": str(statement.minimum_payment),
                            "transactions_linked": len(expenses),
                        },
                    },
                )
            )

        return statement
