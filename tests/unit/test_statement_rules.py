"""Unit tests for statement windows, totals and status."""

from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from src.domain.entities import AccountType, InstallmentPurchase, StatementStatus
from src.service.billing import (
    BillingSettings,
    flat_msi_amount,
    minimum_payment,
    split_evenly,
    statement_status,
    statement_window,
    to_money,
)


def make_purchase(monthly: str, installments: int, paid_installments: int) -> InstallmentPurchase:
    return InstallmentPurchase(
        user_id="user_1",
        description="Phone",
        total_amount=Decimal(monthly) * installments,
        installments=installments,
        monthly_payment=Decimal(monthly),
        purchase_date=datetime(2025, 1, 10),
        account_id=uuid4(),
        paid_installments=paid_installments,
    )


class TestStatementWindow:
    def test_cutoff_20_payment_5(self):
        window = statement_window(20, 5, datetime(2025, 6, 20, 0, 5))

        assert window.cycle_end == datetime(2025, 6, 20)
        assert window.cycle_start == datetime(2025, 5, 21)
        assert window.payment_due_date == datetime(2025, 7, 5)
        assert window.charges_until == datetime(2025, 6, 20, 23, 59, 59, 999000)

    def test_payment_day_later_in_the_same_month(self):
        window = statement_window(5, 25, date(2025, 6, 5))

        assert window.payment_due_date == datetime(2025, 6, 25)

    def test_without_payment_day_uses_offset(self):
        window = statement_window(20, None, date(2025, 6, 20))

        assert window.payment_due_date == datetime(2025, 7, 10)

    def test_offset_is_configurable(self):
        settings = BillingSettings(default_payment_offset_days=10)

        window = statement_window(20, None, date(2025, 6, 20), settings)

        assert window.payment_due_date == datetime(2025, 6, 30)

    def test_cutoff_31_cutting_on_february_28(self):
        window = statement_window(31, 15, date(2025, 2, 28))

        assert window.cycle_start == datetime(2025, 2, 1)
        assert window.cycle_end == datetime(2025, 2, 28)
        assert window.payment_due_date == datetime(2025, 3, 15)

    def test_cutoff_31_cutting_on_march_31(self):
        window = statement_window(31, 15, date(2025, 3, 31))

        assert window.cycle_start == datetime(2025, 3, 1)


class TestTotals:
    def test_flat_msi_counts_one_payment_per_active_plan(self):
        purchases = [
            make_purchase("300", 6, 1),
            make_purchase("150", 3, 2),
            make_purchase("500", 4, 4),
        ]

        assert flat_msi_amount(purchases) == Decimal("450.00")

    def test_flat_msi_of_nothing_is_zero(self):
        assert flat_msi_amount([]) == Decimal("0.00")

    def test_flat_msi_skips_plan_with_counter_past_its_length(self):
        overcounted = make_purchase("200", 3, 4)

        assert overcounted.remaining_installments == 0
        assert flat_msi_amount([overcounted, make_purchase("100", 2, 0)]) == Decimal("100.00")

    @pytest.mark.parametrize(
        "total_due,expected",
        [
            ("1500", "200.00"),
            ("10000", "500.00"),
            ("4000", "200.00"),
            ("0", "200.00"),
            ("12345.67", "617.28"),
        ],
    )
    def test_minimum_payment(self, total_due, expected):
        assert minimum_payment(Decimal(total_due)) == Decimal(expected)


class TestStatementStatus:
    DUE = datetime(2025, 7, 5)

    def test_pending_before_due_date(self):
        status = statement_status(Decimal("1500"), Decimal("0"), self.DUE, datetime(2025, 6, 25))
        assert status == StatementStatus.PENDING

    def test_partial_payment(self):
        status = statement_status(Decimal("1500"), Decimal("500"), self.DUE, datetime(2025, 6, 25))
        assert status == StatementStatus.PARTIAL

    def test_paid_within_tolerance(self):
        status = statement_status(Decimal("1500"), Decimal("1499.99"), self.DUE, datetime(2025, 6, 25))
        assert status == StatementStatus.PAID

    def test_overdue_after_due_date(self):
        status = statement_status(Decimal("1500"), Decimal("500"), self.DUE, datetime(2025, 7, 6))
        assert status == StatementStatus.OVERDUE

    def test_not_overdue_on_due_date(self):
        status = statement_status(Decimal("1500"), Decimal("0"), self.DUE, datetime(2025, 7, 5, 18))
        assert status == StatementStatus.PENDING

    def test_paid_wins_over_overdue(self):
        status = statement_status(Decimal("1500"), Decimal("1500"), self.DUE, datetime(2025, 8, 1))
        assert status == StatementStatus.PAID


class TestMoney:
    def test_float_noise_is_removed(self):
        assert to_money(0.1 + 0.2) == Decimal("0.30")

    def test_rounds_half_up(self):
        assert to_money(Decimal("2.675")) == Decimal("2.68")

    def test_none_is_zero(self):
        assert to_money(None) == Decimal("0.00")

    def test_split_evenly(self):
        assert split_evenly(Decimal("100"), 3) == Decimal("33.33")
        assert split_evenly(Decimal("1800"), 6) == Decimal("300.00")

    def test_split_into_zero_parts_raises(self):
        with pytest.raises(ValueError):
            split_evenly(Decimal("100"), 0)


class TestAccountType:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("CREDIT", AccountType.CREDIT),
            ("credit", AccountType.CREDIT),
            ("Credit Card", AccountType.CREDIT),
            ("Tarjeta de Crédito", AccountType.CREDIT),
            ("debit", AccountType.DEBIT),
            ("Efectivo", AccountType.CASH),
            (AccountType.CASH, AccountType.CASH),
        ],
    )
    def test_normalize_spellings(self, raw, expected):
        assert AccountType.normalize(raw) == expected

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValueError):
            AccountType.normalize("crypto wallet")
