"""
Integration tests for financial planning.

These tests verify:
1. The period summary weighs cash and expected income against commitments
2. An installment plan already paid in the due month is not counted again
3. Regular card charges count net of unlinked payments into the card
4. Upcoming commitments list schedules and card payments by due date
5. Card interest projections use the card's current debt
"""

from datetime import datetime
from decimal import Decimal

import pytest

from src.application.dto import CreateRecurringRequest, PostTransactionRequest
from src.domain.entities import Frequency, TransactionType
from src.domain.exceptions import AccountNotFoundException, ValidationException
from src.service.planning import PeriodType

NOW = datetime(2025, 6, 3, 10, 0)
PAYMENT_DUE = datetime(2025, 6, 5, 12, 0)


@pytest.fixture
def schedule(recurring_service, user_id):
    async def _schedule(account_id, description: str, amount: str, type, frequency, start_date):
        return await recurring_service.create_recurring(
            CreateRecurringRequest(
                user_id=user_id,
                description=description,
                amount=Decimal(amount),
                type=type,
                frequency=frequency,
                start_date=start_date,
                account_id=account_id,
            )
        )

    return _schedule


@pytest.fixture
def ledger(
    open_account, open_card, buy_in_installments, installment_service,
    transaction_service, schedule, user_id,
):
    """
    A wallet, a card cutting on the 20th and due on the 5th, and three schedules.

    The card's cycle paid on June 5 runs April 21 to May 20. It carries two
    plans charging 300 each, one of them already paid on June 2, and 500
    of regular charges of which 200 were paid on May 25.
    """

    async def _build():
        wallet = await open_account(balance="10000")
        card = await open_card()

        await buy_in_installments(card, "1800", 6, datetime(2025, 3, 15, 12), description="Laptop")
        paid_plan = await buy_in_installments(card, "900", 3, datetime(2025, 4, 25, 12), description="Phone")
        await transaction_service.post_transaction(
            PostTransactionRequest(
                user_id=user_id,
                amount=Decimal("500"),
                type=TransactionType.EXPENSE,
                account_id=card,
                description="Groceries",
                date=datetime(2025, 5, 10, 12),
            )
        )
        await installment_service.pay_installment(
            user_id, paid_plan, Decimal("300"), source_account_id=wallet, date=datetime(2025, 6, 2, 9)
        )
        await transaction_service.post_transaction(
            PostTransactionRequest(
                user_id=user_id,
                amount=Decimal("200"),
                type=TransactionType.TRANSFER,
                account_id=wallet,
                destination_account_id=card,
                description="Card payment",
                date=datetime(2025, 5, 25, 9),
            )
        )

        await schedule(
            wallet, "Salary", "8000", TransactionType.INCOME, Frequency.SEMIMONTHLY, datetime(2025, 6, 15, 9)
        )
        await schedule(
            wallet, "Rent", "3000", TransactionType.EXPENSE, Frequency.MONTHLY, datetime(2025, 6, 10, 9)
        )
        await schedule(
            wallet, "Gym", "200", TransactionType.EXPENSE, Frequency.MONTHLY, datetime(2025, 6, 1, 9)
        )
        return wallet, card

    return _build


class TestPeriodSummary:
    @pytest.mark.asyncio
    async def test_summary_of_the_first_half_of_june(self, planning_service, ledger, user_id):
        await ledger()

        summary = await planning_service.get_period_summary(user_id, PeriodType.BIWEEKLY, NOW)

        assert summary.period_start == datetime(2025, 6, 1)
        assert summary.current_balance == Decimal("9500.00")
        assert summary.current_debt == Decimal("2700.00")
        assert summary.current_msi_debt == Decimal("2400.00")

        assert [(i.description, i.due_date) for i in summary.expected_income] == [
            ("Salary", datetime(2025, 6, 15, 9))
        ]
        expenses = {i.description: i for i in summary.expected_expenses}
        assert set(expenses) == {"Rent", "Gym"}
        assert expenses["Gym"].is_overdue
        assert not expenses["Rent"].is_overdue

        assert summary.total_expected_income == Decimal("8000.00")
        assert summary.total_commitments == Decimal("3800.00")
        assert summary.disposable_income == Decimal("13700.00")
        assert summary.is_sufficient
        assert summary.shortfall == Decimal("0")
        assert summary.warnings == []

    @pytest.mark.asyncio
    async def test_plan_paid_in_the_due_month_is_not_counted(self, planning_service, ledger, user_id):
        await ledger()

        summary = await planning_service.get_period_summary(user_id, PeriodType.BIWEEKLY, NOW)

        msi = [p for p in summary.card_payments_due if p.is_msi]
        assert [(p.description, p.amount, p.due_date) for p in msi] == [
            ("Installment Laptop", Decimal("300.00"), PAYMENT_DUE)
        ]

    @pytest.mark.asyncio
    async def test_regular_charges_net_of_unlinked_payments(self, planning_service, ledger, user_id):
        await ledger()

        summary = await planning_service.get_period_summary(user_id, PeriodType.BIWEEKLY, NOW)

        regular = [p for p in summary.card_payments_due if not p.is_msi]
        assert [(p.amount, p.due_date) for p in regular] == [(Decimal("300.00"), PAYMENT_DUE)]

    @pytest.mark.asyncio
    async def test_no_card_payment_outside_the_period(self, planning_service, ledger, user_id):
        await ledger()

        summary = await planning_service.get_period_summary(
            user_id, PeriodType.BIWEEKLY, datetime(2025, 6, 20, 10)
        )

        assert summary.card_payments_due == []

    @pytest.mark.asyncio
    async def test_shortfall_when_commitments_exceed_funds(
        self, planning_service, open_account, schedule, user_id
    ):
        wallet = await open_account(balance="100")
        await schedule(
            wallet, "Rent", "3000", TransactionType.EXPENSE, Frequency.MONTHLY, datetime(2025, 6, 10, 9)
        )

        summary = await planning_service.get_period_summary(user_id, PeriodType.BIWEEKLY, NOW)

        assert summary.disposable_income == Decimal("-2900.00")
        assert not summary.is_sufficient
        assert summary.shortfall == Decimal("2900.00")
        assert any("exceed" in w for w in summary.warnings)


class TestUpcomingCommitments:
    @pytest.mark.asyncio
    async def test_next_seven_days(self, planning_service, ledger, user_id):
        await ledger()

        upcoming = await planning_service.get_upcoming_commitments(user_id, 7, NOW)

        assert upcoming.window_start == datetime(2025, 6, 3)
        assert [(c.kind, c.due_date.day) for c in upcoming.commitments] == [
            ("recurring", 1),
            ("card_payment", 5),
            ("card_payment", 5),
            ("recurring", 10),
        ]
        assert upcoming.commitments[0].is_overdue
        assert upcoming.total == Decimal("3800.00")

    @pytest.mark.asyncio
    async def test_days_must_be_positive(self, planning_service, user_id):
        with pytest.raises(ValidationException):
            await planning_service.get_upcoming_commitments(user_id, 0, NOW)


class TestCardInterest:
    @pytest.mark.asyncio
    async def test_projection_with_a_fixed_payment(self, planning_service, open_card, user_id):
        card = await open_card(balance="10000")

        projection = await planning_service.project_card_interest(
            user_id, card, Decimal("0.45"), Decimal("1000")
        )

        assert projection.balance == Decimal("10000.00")
        assert projection.monthly_interest == Decimal("375.00")
        assert projection.minimum_payment == Decimal("500.00")
        assert projection.payoff_months == 13
        assert len(projection.amortization) == 13
        assert projection.amortization[-1].balance == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_defaults_to_the_minimum_payment(self, planning_service, open_card, user_id):
        card = await open_card(balance="10000")

        projection = await planning_service.project_card_interest(user_id, card, Decimal("0.45"))

        assert projection.monthly_payment == Decimal("500.00")
        assert projection.payoff_months is not None
        assert projection.minimum_only.total_interest > 0

    @pytest.mark.asyncio
    async def test_only_credit_cards(self, planning_service, open_account, user_id):
        wallet = await open_account(balance="1000")

        with pytest.raises(AccountNotFoundException):
            await planning_service.project_card_interest(user_id, wallet, Decimal("0.45"))

    @pytest.mark.asyncio
    async def test_negative_rate_is_rejected(self, planning_service, open_card, user_id):
        card = await open_card(balance="10000")

        with pytest.raises(ValidationException):
            await planning_service.project_card_interest(user_id, card, Decimal("-0.1"))
