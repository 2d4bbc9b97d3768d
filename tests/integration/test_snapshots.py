"""Integration tests for daily balance snapshots and history queries."""

from datetime import date
from decimal import Decimal

import pytest

from src.application.dto import PostTransactionRequest
from src.domain.entities import TransactionType


class TestDailySnapshots:
    @pytest.mark.asyncio
    async def test_rerun_skips_unchanged_balances(
        self, snapshot_service, transaction_service, open_account, open_card, user_id
    ):
        debit = await open_account("DEBIT", "1000")
        await open_card("400")
        today = date.today()

        first = await snapshot_service.create_daily_snapshots(today)
        assert (first.created, first.skipped, first.errors) == (2, 0, 0)

        second = await snapshot_service.create_daily_snapshots(today)
        assert (second.created, second.skipped, second.errors) == (0, 2, 0)

        await transaction_service.post_transaction(
            PostTransactionRequest(
                user_id=user_id,
                amount=Decimal("250"),
                type=TransactionType.EXPENSE,
                account_id=debit,
            )
        )
        third = await snapshot_service.create_daily_snapshots(today)
        assert (third.created, third.skipped) == (1, 1)

        [point] = await snapshot_service.get_balance_history(user_id, debit, days=7)
        assert point.date == today
        assert point.balance == Decimal("750.00")

    @pytest.mark.asyncio
    async def test_net_worth_treats_cards_as_liabilities(
        self, snapshot_service, open_account, open_card, user_id
    ):
        await open_account("DEBIT", "1000")
        await open_account("CASH", "150")
        await open_card("400")
        await snapshot_service.create_daily_snapshots(date.today())

        [point] = await snapshot_service.get_net_worth_history(user_id, days=7)

        assert point.assets == Decimal("1150.00")
        assert point.liabilities == Decimal("400.00")
        assert point.net_worth == Decimal("750.00")
