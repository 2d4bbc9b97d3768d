"""
Integration tests for the daily statement generator.

These tests verify:
1. Only cards cutting today are processed
2. Statement totals, window and link of billed charges
3. Re-running on the same day creates nothing
4. One failing account does not stop the run
5. Payments are applied to open statements, which later go overdue
"""

from datetime import datetime
from decimal import Decimal

import pytest

from src.application.dto import PostTransactionRequest
from src.domain.entities import StatementStatus, TransactionType

CUTOFF_RUN = datetime(2025, 6, 20, 0, 5)


@pytest.fixture
def post_expense(transaction_service, user_id):
    async def _post(account_id, amount: str, when: datetime):
        return await transaction_service.post_transaction(
            PostTransactionRequest(
                user_id=user_id,
                amount=Decimal(amount),
                type=TransactionType.EXPENSE,
                account_id=account_id,
                description="Card purchase",
                date=when,
            )
        )

    return _post


class TestGenerateStatements:
    @pytest.mark.asyncio
    async def test_freezes_cycle_totals(
        self, statement_service, transaction_service, open_card, open_account,
        buy_in_installments, post_expense, user_id,
    ):
        card = await open_card()
        await open_card(cutoff_day=15)
        await open_account("DEBIT", "500")
        await buy_in_installments(card, "1800", 6, datetime(2025, 5, 15, 12))
        billed = await post_expense(card, "1200", datetime(2025, 6, 1, 18))
        carried = await post_expense(card, "80", datetime(2025, 5, 10, 9))
        await post_expense(card, "45", datetime(2025, 6, 20, 21))

        result = await statement_service.generate_statements(CUTOFF_RUN)

        assert result.processed == 1
        assert len(result.statements) == 1
        assert result.failed == 0

        [statement] = await statement_service.list_statements(user_id, card)
        assert statement.statement_id == result.statements[0]
        assert statement.cycle_start == datetime(2025, 5, 21)
        assert statement.cycle_end == datetime(2025, 6, 20)
        assert statement.payment_due_date == datetime(2025, 7, 5)
        assert statement.regular_charges == Decimal("1325.00")
        assert statement.msi_amount == Decimal("300.00")
        assert statement.total_due == Decimal("1625.00")
        assert statement.minimum_payment == Decimal("200.00")
        assert statement.status == StatementStatus.PENDING.value

        linked = await transaction_service.get_transaction(user_id, billed.transaction_id)
        assert linked.statement_id == statement.statement_id
        carried = await transaction_service.get_transaction(user_id, carried.transaction_id)
        assert carried.statement_id == statement.statement_id

    @pytest.mark.asyncio
    async def test_second_run_on_same_day_creates_nothing(
        self, statement_service, open_card, post_expense, user_id
    ):
        card = await open_card()
        await post_expense(card, "1200", datetime(2025, 6, 1, 18))

        first = await statement_service.generate_statements(CUTOFF_RUN)
        second = await statement_service.generate_statements(CUTOFF_RUN.replace(hour=15))

        assert len(first.statements) == 1
        assert second.processed == 1
        assert second.statements == []
        assert second.skipped == 1
        assert len(await statement_service.list_statements(user_id, card)) == 1

    @pytest.mark.asyncio
    async def test_billed_charges_are_not_billed_again(
        self, statement_service, open_card, post_expense, user_id
    ):
        card = await open_card()
        await post_expense(card, "1200", datetime(2025, 6, 1, 18))
        await statement_service.generate_statements(CUTOFF_RUN)
        await post_expense(card, "100", datetime(2025, 7, 1, 10))

        await statement_service.generate_statements(datetime(2025, 7, 20, 0, 5))

        july, june = await statement_service.list_statements(user_id, card)
        assert june.regular_charges == Decimal("1200.00")
        assert july.regular_charges == Decimal("100.00")
        assert july.cycle_start == datetime(2025, 6, 21)

    @pytest.mark.asyncio
    async def test_charge_after_run_on_cutoff_day_is_billed_next_cycle(
        self, statement_service, open_card, post_expense, user_id
    ):
        card = await open_card()
        await statement_service.generate_statements(CUTOFF_RUN)
        await post_expense(card, "45", datetime(2025, 6, 20, 15))

        await statement_service.generate_statements(datetime(2025, 7, 20, 0, 5))

        july, june = await statement_service.list_statements(user_id, card)
        assert june.regular_charges == Decimal("0.00")
        assert july.regular_charges == Decimal("45.00")
        assert july.total_due == Decimal("45.00")

    @pytest.mark.asyncio
    async def test_failing_account_does_not_stop_the_run(
        self, statement_service, open_card, monkeypatch
    ):
        broken = await open_card()
        healthy = await open_card()
        original = statement_service._generate_for_account

        async def flaky(account_id, today):
            if account_id == broken:
                raise RuntimeError("storage hiccup")
            return await original(account_id, today)

        monkeypatch.setattr(statement_service, "_generate_for_account", flaky)

        result = await statement_service.generate_statements(CUTOFF_RUN)

        assert result.processed == 2
        assert result.failed == 1
        assert len(result.statements) == 1

    @pytest.mark.asyncio
    async def test_card_cutting_on_31_runs_on_last_day_of_short_month(
        self, statement_service, open_card
    ):
        await open_card(cutoff_day=31, payment_day=15)

        result = await statement_service.generate_statements(datetime(2025, 4, 30, 0, 5))

        assert result.processed == 1
        assert len(result.statements) == 1


class TestStatementPayments:
    @pytest.mark.asyncio
    async def test_payment_is_applied_to_open_statement(
        self, statement_service, transaction_service, open_card, open_account,
        post_expense, user_id,
    ):
        card = await open_card()
        source = await open_account("DEBIT", "5000")
        await post_expense(card, "1500", datetime(2025, 6, 1, 18))
        await statement_service.generate_statements(CUTOFF_RUN)

        partial = await transaction_service.post_transaction(
            PostTransactionRequest(
                user_id=user_id,
                amount=Decimal("500"),
                type=TransactionType.TRANSFER,
                account_id=source,
                destination_account_id=card,
                date=datetime(2025, 6, 25, 10),
            )
        )
        [statement] = await statement_service.list_statements(user_id, card)
        assert statement.paid_amount == Decimal("500.00")
        assert statement.status == StatementStatus.PARTIAL.value
        assert partial.statement_id == statement.statement_id

        await transaction_service.post_transaction(
            PostTransactionRequest(
                user_id=user_id,
                amount=Decimal("1000"),
                type=TransactionType.TRANSFER,
                account_id=source,
                destination_account_id=card,
                date=datetime(2025, 6, 26, 10),
            )
        )
        [statement] = await statement_service.list_statements(user_id, card)
        assert statement.paid_amount == Decimal("1500.00")
        assert statement.status == StatementStatus.PAID.value

    @pytest.mark.asyncio
    async def test_deleting_payment_takes_it_back_from_statement(
        self, statement_service, transaction_service, open_card, open_account,
        post_expense, user_id,
    ):
        card = await open_card()
        source = await open_account("DEBIT", "5000")
        await post_expense(card, "1500", datetime(2025, 6, 1, 18))
        await statement_service.generate_statements(CUTOFF_RUN)
        payment = await transaction_service.post_transaction(
            PostTransactionRequest(
                user_id=user_id,
                amount=Decimal("500"),
                type=TransactionType.TRANSFER,
                account_id=source,
                destination_account_id=card,
                date=datetime(2025, 6, 25, 10),
            )
        )

        await transaction_service.delete_transaction(user_id, payment.transaction_id)

        [statement] = await statement_service.list_statements(user_id, card)
        assert statement.paid_amount == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_unpaid_statement_goes_overdue(
        self, statement_service, open_card, post_expense, user_id
    ):
        card = await open_card()
        await post_expense(card, "1500", datetime(2025, 6, 1, 18))
        await statement_service.generate_statements(CUTOFF_RUN)

        assert await statement_service.mark_overdue(datetime(2025, 7, 5, 18)) == 0
        assert await statement_service.mark_overdue(datetime(2025, 7, 10)) == 1

        [statement] = await statement_service.list_statements(user_id, card)
        assert statement.status == StatementStatus.OVERDUE.value
