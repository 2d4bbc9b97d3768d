"""
Integration tests for the ledger posting engine.

These tests verify:
1. Balance direction per account type for expenses, incomes and transfers
2. Transfers conserve money between accounts
3. Rejected postings leave no partial state
4. Installment payment linkage and overpayment rejection
"""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from src.application.dto import PostTransactionRequest
from src.domain.entities import TransactionType
from src.domain.exceptions import (
    AccountNotFoundException,
    InstallmentAlreadyPaidException,
    InsufficientFundsException,
    OverpaymentRejectedException,
    ValidationException,
)


def request(user_id, type, account_id, amount, **kwargs) -> PostTransactionRequest:
    return PostTransactionRequest(
        user_id=user_id,
        amount=Decimal(amount),
        type=type,
        account_id=account_id,
        date=kwargs.pop("date", datetime(2025, 6, 1, 10)),
        **kwargs,
    )


class TestSingleAccountPostings:
    @pytest.mark.asyncio
    async def test_expense_on_debit_decreases_balance(
        self, transaction_service, open_account, balance_of, user_id
    ):
        debit = await open_account("DEBIT", "1000")

        await transaction_service.post_transaction(
            request(user_id, TransactionType.EXPENSE, debit, "250.50", category_id="groceries")
        )

        assert await balance_of(debit) == Decimal("749.50")

    @pytest.mark.asyncio
    async def test_income_on_cash_increases_balance(
        self, transaction_service, open_account, balance_of, user_id
    ):
        cash = await open_account("CASH", "10")

        await transaction_service.post_transaction(request(user_id, TransactionType.INCOME, cash, "90"))

        assert await balance_of(cash) == Decimal("100.00")

    @pytest.mark.asyncio
    async def test_expense_on_credit_adds_debt_and_income_pays_it(
        self, transaction_service, open_card, balance_of, user_id
    ):
        card = await open_card()

        await transaction_service.post_transaction(request(user_id, TransactionType.EXPENSE, card, "800"))
        assert await balance_of(card) == Decimal("800.00")

        await transaction_service.post_transaction(request(user_id, TransactionType.INCOME, card, "300"))
        assert await balance_of(card) == Decimal("500.00")

    @pytest.mark.asyncio
    async def test_insufficient_funds_leaves_nothing_behind(
        self, transaction_service, open_account, balance_of, user_id
    ):
        debit = await open_account("DEBIT", "100")

        with pytest.raises(InsufficientFundsException):
            await transaction_service.post_transaction(
                request(user_id, TransactionType.EXPENSE, debit, "100.01")
            )

        assert await balance_of(debit) == Decimal("100.00")
        assert await transaction_service.list_transactions(user_id) == []

    @pytest.mark.asyncio
    async def test_category_is_kept_on_non_transfers(
        self, transaction_service, open_account, user_id
    ):
        debit = await open_account("DEBIT", "100")

        response = await transaction_service.post_transaction(
            request(user_id, TransactionType.EXPENSE, debit, "10", category_id="groceries")
        )

        assert response.category_id == "groceries"
        assert response.destination_account_id is None


class TestTransfers:
    @pytest.mark.asyncio
    async def test_transfer_between_debit_accounts_conserves_money(
        self, transaction_service, open_account, balance_of, user_id
    ):
        source = await open_account("DEBIT", "1000")
        target = await open_account("CASH", "0")

        response = await transaction_service.post_transaction(
            request(
                user_id,
                TransactionType.TRANSFER,
                source,
                "300",
                destination_account_id=target,
                category_id="groceries",
            )
        )

        assert await balance_of(source) == Decimal("700.00")
        assert await balance_of(target) == Decimal("300.00")
        assert response.category_id is None

    @pytest.mark.asyncio
    async def test_transfer_to_card_pays_down_debt(
        self, transaction_service, open_account, open_card, balance_of, user_id
    ):
        source = await open_account("DEBIT", "1000")
        card = await open_card("500")

        await transaction_service.post_transaction(
            request(user_id, TransactionType.TRANSFER, source, "200", destination_account_id=card)
        )

        assert await balance_of(source) == Decimal("800.00")
        assert await balance_of(card) == Decimal("300.00")

    @pytest.mark.asyncio
    async def test_transfer_larger_than_card_debt_is_rejected(
        self, transaction_service, open_account, open_card, balance_of, user_id
    ):
        source = await open_account("DEBIT", "1000")
        card = await open_card("500")

        with pytest.raises(OverpaymentRejectedException):
            await transaction_service.post_transaction(
                request(user_id, TransactionType.TRANSFER, source, "600", destination_account_id=card)
            )

        assert await balance_of(source) == Decimal("1000.00")
        assert await balance_of(card) == Decimal("500.00")

    @pytest.mark.asyncio
    async def test_transfer_to_same_account_is_invalid(
        self, transaction_service, open_account, user_id
    ):
        source = await open_account("DEBIT", "1000")

        with pytest.raises(ValidationException):
            await transaction_service.post_transaction(
                request(user_id, TransactionType.TRANSFER, source, "10", destination_account_id=source)
            )

    @pytest.mark.asyncio
    async def test_transfer_to_another_users_account_is_not_found(
        self, transaction_service, open_account, balance_of, user_id
    ):
        source = await open_account("DEBIT", "1000")
        foreign = await open_account("DEBIT", "0", user_id="someone_else")

        with pytest.raises(AccountNotFoundException):
            await transaction_service.post_transaction(
                request(user_id, TransactionType.TRANSFER, source, "10", destination_account_id=foreign)
            )

        assert await balance_of(source) == Decimal("1000.00")

    @pytest.mark.asyncio
    async def test_unknown_account_is_not_found(self, transaction_service, user_id):
        with pytest.raises(AccountNotFoundException):
            await transaction_service.post_transaction(
                request(user_id, TransactionType.INCOME, uuid4(), "10")
            )


class TestDeleteTransaction:
    @pytest.mark.asyncio
    async def test_delete_reverses_transfer(
        self, transaction_service, open_account, open_card, balance_of, user_id
    ):
        source = await open_account("DEBIT", "1000")
        card = await open_card("500")
        posted = await transaction_service.post_transaction(
            request(user_id, TransactionType.TRANSFER, source, "200", destination_account_id=card)
        )

        await transaction_service.delete_transaction(user_id, posted.transaction_id)

        assert await balance_of(source) == Decimal("1000.00")
        assert await balance_of(card) == Decimal("500.00")
        assert await transaction_service.list_transactions(user_id) == []

    @pytest.mark.asyncio
    async def test_installment_charge_cannot_be_deleted_alone(
        self, transaction_service, open_card, buy_in_installments, user_id
    ):
        card = await open_card()
        await buy_in_installments(card, "1800", 6, datetime(2025, 5, 15, 12))
        [charge] = await transaction_service.list_transactions(user_id)

        with pytest.raises(ValidationException):
            await transaction_service.delete_transaction(user_id, charge.transaction_id)


class TestInstallmentLinkage:
    @pytest.mark.asyncio
    async def test_creation_charges_total_to_card(
        self, installment_service, open_card, buy_in_installments, balance_of, user_id
    ):
        card = await open_card()

        installment_id = await buy_in_installments(card, "1800", 6, datetime(2025, 5, 15, 12))

        installment = await installment_service.get_installment(user_id, installment_id)
        assert installment.monthly_payment == Decimal("300.00")
        assert installment.paid_installments == 0
        assert await balance_of(card) == Decimal("1800.00")

    @pytest.mark.asyncio
    async def test_installments_only_on_credit_accounts(
        self, open_account, buy_in_installments
    ):
        debit = await open_account("DEBIT", "5000")

        with pytest.raises(ValidationException):
            await buy_in_installments(debit, "1800", 6, datetime(2025, 5, 15, 12))

    @pytest.mark.asyncio
    async def test_payment_updates_progress(
        self, transaction_service, installment_service, open_account, open_card,
        buy_in_installments, user_id,
    ):
        source = await open_account("DEBIT", "5000")
        card = await open_card()
        installment_id = await buy_in_installments(card, "1800", 6, datetime(2025, 5, 15, 12))

        await transaction_service.post_transaction(
            request(
                user_id,
                TransactionType.TRANSFER,
                source,
                "650",
                destination_account_id=card,
                installment_purchase_id=installment_id,
            )
        )

        installment = await installment_service.get_installment(user_id, installment_id)
        assert installment.paid_amount == Decimal("650.00")
        assert installment.paid_installments == 2

    @pytest.mark.asyncio
    async def test_overpayment_is_rejected_and_progress_unchanged(
        self, transaction_service, installment_service, open_card, buy_in_installments,
        balance_of, user_id,
    ):
        card = await open_card()
        installment_id = await buy_in_installments(card, "600", 3, datetime(2025, 5, 15, 12))

        with pytest.raises(OverpaymentRejectedException):
            await transaction_service.post_transaction(
                request(
                    user_id,
                    TransactionType.INCOME,
                    card,
                    "605.01",
                    installment_purchase_id=installment_id,
                )
            )

        installment = await installment_service.get_installment(user_id, installment_id)
        assert installment.paid_amount == Decimal("0.00")
        assert installment.paid_installments == 0
        assert await balance_of(card) == Decimal("600.00")

    @pytest.mark.asyncio
    async def test_settled_plan_rejects_further_payments(
        self, transaction_service, installment_service, open_card, buy_in_installments, user_id
    ):
        card = await open_card("100")
        installment_id = await buy_in_installments(card, "600", 3, datetime(2025, 5, 15, 12))

        await transaction_service.post_transaction(
            request(user_id, TransactionType.INCOME, card, "600", installment_purchase_id=installment_id)
        )
        installment = await installment_service.get_installment(user_id, installment_id)
        assert installment.is_paid_off
        assert installment.paid_installments == 3

        with pytest.raises(InstallmentAlreadyPaidException):
            await transaction_service.post_transaction(
                request(user_id, TransactionType.INCOME, card, "50", installment_purchase_id=installment_id)
            )

    @pytest.mark.asyncio
    async def test_deleting_plan_restores_balances(
        self, installment_service, transaction_service, open_account, open_card,
        buy_in_installments, balance_of, user_id,
    ):
        source = await open_account("DEBIT", "1000")
        card = await open_card()
        installment_id = await buy_in_installments(card, "1800", 6, datetime(2025, 5, 15, 12))
        await installment_service.pay_installment(
            user_id, installment_id, Decimal("300"), source_account_id=source
        )
        assert await balance_of(source) == Decimal("700.00")
        assert await balance_of(card) == Decimal("1500.00")

        await installment_service.delete_installment(user_id, installment_id)

        assert await balance_of(source) == Decimal("1000.00")
        assert await balance_of(card) == Decimal("0.00")
        assert await installment_service.list_installments(user_id) == []
        assert await transaction_service.list_transactions(user_id) == []
