"""
Planning service - cash-flow projections and card interest estimates.

Read-only: nothing here posts to the ledger. Projections combine the
active recurring schedules with the card payments falling due, computed
from the live billing cycles rather than frozen statements.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

import structlog

from src.application.dto import (
    CardInterestProjection,
    CardPaymentDueDTO,
    CommitmentDTO,
    ExpectedItemDTO,
    PeriodSummary,
    UpcomingCommitments,
)
from src.domain.entities import Account
from src.domain.exceptions import AccountNotFoundException, ValidationException
from src.domain.interfaces import UnitOfWork, UnitOfWorkFactory
from src.service.billing import (
    ZERO,
    BillingSettings,
    amortization_table,
    attribute_installments,
    billing_settings,
    get_billing_cycle,
    is_paid_in_month,
    minimum_payment,
    minimum_payment_cost,
    monthly_interest,
    projected_payoff_months,
    to_money,
)
from src.service.billing.dates import start_of_day
from src.service.planning import (
    PeriodType,
    PlanningPeriod,
    payment_dates_between,
    planning_period,
    project_occurrences,
    upcoming_window,
)

logger = structlog.get_logger(__name__)

HIGH_DEBT_RATIO = Decimal("0.6")
COMMITMENT_ALERT_RATIO = Decimal("0.8")


@dataclass
class _Projection:
    income: List[ExpectedItemDTO] = field(default_factory=list)
    expenses: List[ExpectedItemDTO] = field(default_factory=list)
    card_payments: List[CardPaymentDueDTO] = field(default_factory=list)


def _total(items) -> Decimal:
    return to_money(sum((item.amount for item in items), ZERO))


def planning_warnings(
    current_balance: Decimal,
    current_debt: Decimal,
    expected_income: Decimal,
    commitments: Decimal,
) -> List[str]:
    """Plain-language alerts about debt load and coverage of commitments."""
    warnings = []

    if current_debt > 0 and current_balance > 0 and current_debt > current_balance * HIGH_DEBT_RATIO:
        warnings.append("Card debt is high compared to available cash.")
    elif current_debt > 0 and current_balance == 0:
        warnings.append("There is card debt and no cash available; prioritize liquidity.")

    available = current_balance + expected_income
    if commitments > 0:
        if available == 0:
            warnings.append("Commitments are pending and no funds are available.")
        elif commitments > available:
            warnings.append(
                f"Commitments ({commitments}) exceed the funds available in the period ({available})."
            )
        elif commitments > available * COMMITMENT_ALERT_RATIO:
            warnings.append("Commitments take more than 80% of the funds available in the period.")

    return warnings


class PlanningService:
    """Application service for planning views over a user's ledger."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        settings: BillingSettings = billing_settings,
    ):
        self._uow_factory = uow_factory
        self._settings = settings

    async def get_period_summary(
        self,
        user_id: str,
        period_type: PeriodType = PeriodType.BIWEEKLY,
        now: Optional[datetime] = None,
    ) -> PeriodSummary:
        """
        Compare the cash on hand with what the period brings and demands.

        Disposable income is the current balance of non-credit accounts
        plus expected income minus recurring expenses and card payments due
        in the period.
        """
        now = now or datetime.now()
        period = planning_period(period_type, now)

        async with self._uow_factory() as uow:
            accounts = await uow.accounts.list_by_user(user_id)
            projection = await self._project(uow, user_id, accounts, period, now)
            plans = await uow.installments.list_by_user(user_id)

        credit_ids = {a.id for a in accounts if a.is_credit}
        current_balance = to_money(sum((a.balance for a in accounts if not a.is_credit), ZERO))
        current_debt = to_money(sum((abs(a.balance) for a in accounts if a.is_credit), ZERO))
        current_msi_debt = to_money(
            sum(
                (
                    p.remaining_amount
                    for p in plans
                    if p.account_id in credit_ids and not p.is_settled(self._settings.settlement_epsilon)
                ),
                ZERO,
            )
        )

        total_income = _total(projection.income)
        total_commitments = _total(projection.expenses) + _total(projection.card_payments)
        disposable = current_balance + total_income - total_commitments

        logger.info(
            "period_summary_computed",
            user_id=user_id,
            period_type=period_type.value,
            commitments=str(total_commitments),
            disposable_income=str(disposable),
        )
        return PeriodSummary(
            period_type=period_type.value,
            period_start=period.start,
            period_end=period.end,
            current_balance=current_balance,
            current_debt=current_debt,
            current_msi_debt=current_msi_debt,
            expected_income=projection.income,
            expected_expenses=projection.expenses,
            card_payments_due=projection.card_payments,
            total_expected_income=total_income,
            total_commitments=total_commitments,
            disposable_income=disposable,
            is_sufficient=disposable >= 0,
            shortfall=max(ZERO, -disposable),
            warnings=planning_warnings(current_balance, current_debt, total_income, total_commitments),
        )

    async def get_upcoming_commitments(
        self,
        user_id: str,
        days: int = 7,
        now: Optional[datetime] = None,
    ) -> UpcomingCommitments:
        """Recurring expenses and card payments due from today through ``days`` ahead."""
        if days < 1:
            raise ValidationException("days must be at least 1", field="days")

        now = now or datetime.now()
        window = upcoming_window(days, now)

        async with self._uow_factory() as uow:
            accounts = await uow.accounts.list_by_user(user_id)
            projection = await self._project(uow, user_id, accounts, window, now)

        commitments = [
            CommitmentDTO(
                kind="recurring",
                description=item.description,
                amount=item.amount,
                due_date=item.due_date,
                account_id=item.account_id,
                is_overdue=item.is_overdue,
            )
            for item in projection.expenses
        ]
        commitments.extend(
            CommitmentDTO(
                kind="card_payment",
                description=item.description,
                amount=item.amount,
                due_date=item.due_date,
                account_id=item.account_id,
            )
            for item in projection.card_payments
        )
        commitments.sort(key=lambda c: c.due_date)

        return UpcomingCommitments(
            window_start=window.start,
            window_end=window.end,
            commitments=commitments,
            total=_total(commitments),
        )

    async def project_card_interest(
        self,
        user_id: str,
        account_id: UUID,
        annual_rate: Decimal,
        monthly_payment: Optional[Decimal] = None,
    ) -> CardInterestProjection:
        """
        Estimate interest and payoff time for a card's current debt.

        Without ``monthly_payment`` the projection assumes the minimum
        payment on today's balance.

        Raises:
            ValidationException: Negative rate or non-positive payment
            AccountNotFoundException: Missing, not owned, or not a credit card
        """
        if annual_rate < 0:
            raise ValidationException("annual_rate cannot be negative", field="annual_rate")
        if monthly_payment is not None and monthly_payment <= 0:
            raise ValidationException("monthly_payment must be positive", field="monthly_payment")

        async with self._uow_factory() as uow:
            account = await uow.accounts.get(account_id, user_id=user_id)
        if account is None or not account.is_credit:
            raise AccountNotFoundException(str(account_id))

        balance = max(ZERO, to_money(account.balance))
        minimum = minimum_payment(balance, self._settings)
        payment = to_money(monthly_payment) if monthly_payment is not None else minimum

        return CardInterestProjection(
            account_id=str(account.id),
            balance=balance,
            annual_rate=annual_rate,
            monthly_interest=monthly_interest(balance, annual_rate),
            minimum_payment=minimum,
            monthly_payment=payment,
            payoff_months=projected_payoff_months(balance, annual_rate, payment),
            minimum_only=minimum_payment_cost(balance, annual_rate, self._settings),
            amortization=amortization_table(balance, annual_rate, payment),
        )

    async def _project(
        self,
        uow: UnitOfWork,
        user_id: str,
        accounts: List[Account],
        period: PlanningPeriod,
        now: datetime,
    ) -> _Projection:
        projection = _Projection()
        today = start_of_day(now)

        for recurring in await uow.recurring.list_by_user(user_id):
            settled_days = {
                t.date.date() for t in await uow.transactions.list_by_recurring(recurring.id)
            }
            occurrences = project_occurrences(
                recurring.next_due_date,
                recurring.frequency,
                period,
                today,
                settled_days,
            )
            target = projection.income if recurring.is_income else projection.expenses
            target.extend(
                ExpectedItemDTO(
                    recurring_id=str(recurring.id),
                    description=recurring.description,
                    amount=recurring.amount,
                    due_date=occurrence.due_date,
                    account_id=str(recurring.account_id),
                    category_id=recurring.category_id,
                    is_overdue=occurrence.is_overdue,
                )
                for occurrence in occurrences
            )

        for account in accounts:
            if account.is_credit and account.cutoff_day and account.payment_day:
                projection.card_payments.extend(
                    await self._card_payments_due(uow, account, period, now)
                )

        return projection

    async def _card_payments_due(
        self,
        uow: UnitOfWork,
        account: Account,
        period: PlanningPeriod,
        now: datetime,
    ) -> List[CardPaymentDueDTO]:
        """
        Card payments whose due date falls in the period.

        For each due date the cycle it pays is rebuilt. A plan's monthly
        payment counts unless a payment into the card was linked to it in
        the due date's month. Regular charges of the cycle count minus the
        unlinked transfers into the card since the cycle started.
        """
        purchases = await uow.installments.list_by_account(account.id, unpaid_only=True)
        due = []

        for pay_date in payment_dates_between(account.payment_day, period):
            cycle = get_billing_cycle(account.cutoff_day, account.payment_day, reference=pay_date)

            msi_due = []
            for charge in attribute_installments(purchases, cycle.cycle_start_date, cycle.cutoff_date):
                payments = [
                    t
                    for t in await uow.transactions.list_by_installment(charge.purchase_id)
                    if t.target_account_id == account.id
                ]
                if not is_paid_in_month(payments, pay_date):
                    msi_due.append(charge)

            expenses = await uow.transactions.list_regular_expenses(
                account.id,
                cycle.cycle_start_date,
                cycle.cutoff_date,
            )
            transfers = await uow.transactions.list_incoming_transfers(
                account.id,
                cycle.cycle_start_date,
                now,
            )
            charged = _total(expenses)
            paid = _total(t for t in transfers if t.installment_purchase_id is None)
            regular_due = max(ZERO, charged - paid)

            due.extend(
                CardPaymentDueDTO(
                    account_id=str(account.id),
                    account_name=account.name,
                    description=f"Installment {charge.description}",
                    amount=charge.amount,
                    due_date=pay_date,
                    is_msi=True,
                    installment_id=str(charge.purchase_id),
                    total_amount=to_money(charge.paid_amount + charge.remaining_amount),
                    paid_amount=charge.paid_amount,
                )
                for charge in msi_due
            )
            if regular_due > 0:
                due.append(
                    CardPaymentDueDTO(
                        account_id=str(account.id),
                        account_name=account.name,
                        description=f"Cycle charges ({account.name})",
                        amount=regular_due,
                        due_date=pay_date,
                        is_msi=False,
                    )
                )

        return due
