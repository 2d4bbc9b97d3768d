"""
Integration tests for the HTTP API.

These tests verify:
1. Accounts, transactions and installment purchases over HTTP
2. The error envelope for missing users, unknown ids and rejected postings
3. The current statement and statement payment endpoints
4. Recurring schedules and financial planning endpoints
5. Health and metrics endpoints
"""

from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient

from src.core.metrics import REGISTRY
from src.service.billing import get_billing_cycle


async def _create_account(client: AsyncClient, **overrides) -> dict:
    body = {"name": "Checking", "type": "DEBIT", "balance": 1000}
    body.update(overrides)
    response = await client.post("/v1/accounts", json=body)
    assert response.status_code == 201
    return response.json()


async def _create_card(client: AsyncClient) -> dict:
    return await _create_account(
        client,
        name="Gold Card",
        type="CREDIT",
        balance=0,
        credit_limit=50000,
        cutoff_day=20,
        payment_day=5,
    )


# =============================================================================
# Accounts
# =============================================================================

class TestAccountsApi:
    """Tests for /v1/accounts."""

    @pytest.mark.asyncio
    async def test_open_and_list_accounts(self, client: AsyncClient):
        checking = await _create_account(client)
        card = await _create_account(
            client, name="Visa", type="Credit Card", balance=250, credit_limit=1000,
            cutoff_day=20, payment_day=5,
        )

        assert checking["type"] == "DEBIT"
        assert checking["balance"] == 1000
        assert card["type"] == "CREDIT"
        assert card["available_credit"] == 750

        response = await client.get("/v1/accounts")
        assert response.status_code == 200
        assert {a["account_id"] for a in response.json()} == {
            checking["account_id"],
            card["account_id"],
        }

    @pytest.mark.asyncio
    async def test_missing_user_header_is_unauthorized(self, client: AsyncClient):
        response = await client.get("/v1/accounts", headers={"X-User-ID": ""})

        assert response.status_code == 401
        data = response.json()
        assert data["error"] == "UNAUTHORIZED"
        assert "request_id" in data

    @pytest.mark.asyncio
    async def test_unknown_account_returns_error_envelope(self, client: AsyncClient):
        response = await client.get("/v1/accounts/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404
        assert response.json()["error"] == "ACCOUNT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_credit_account_needs_cycle_days(self, client: AsyncClient):
        response = await client.post(
            "/v1/accounts",
            json={"name": "Visa", "type": "CREDIT", "balance": 0, "cutoff_day": 20},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_delete_unused_account_removes_it(self, client: AsyncClient):
        checking = await _create_account(client)

        response = await client.delete(f"/v1/accounts/{checking['account_id']}")

        assert response.status_code == 200
        assert response.json() == {
            "account_id": checking["account_id"],
            "deleted": True,
            "archived": False,
        }
        missing = await client.get(f"/v1/accounts/{checking['account_id']}")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_account_with_history_archives_it(self, client: AsyncClient):
        checking = await _create_account(client)
        await client.post(
            "/v1/transactions",
            json={"amount": 50, "type": "expense", "account_id": checking["account_id"]},
        )

        response = await client.delete(f"/v1/accounts/{checking['account_id']}")

        assert response.status_code == 200
        assert response.json()["archived"] is True
        listed = (await client.get("/v1/accounts")).json()
        assert checking["account_id"] not in {a["account_id"] for a in listed}

    @pytest.mark.asyncio
    async def test_accounts_of_other_users_are_hidden(self, client: AsyncClient):
        checking = await _create_account(client)

        response = await client.get(
            f"/v1/accounts/{checking['account_id']}",
            headers={"X-User-ID": "someone_else"},
        )

        assert response.status_code == 404


# =============================================================================
# Transactions
# =============================================================================

class TestTransactionsApi:
    """Tests for /v1/transactions."""

    @pytest.mark.asyncio
    async def test_post_transfer_moves_both_balances(self, client: AsyncClient):
        checking = await _create_account(client)
        savings = await _create_account(client, name="Savings", balance=0)

        response = await client.post(
            "/v1/transactions",
            json={
                "amount": 400,
                "type": "transfer",
                "account_id": checking["account_id"],
                "destination_account_id": savings["account_id"],
                "description": "Savings",
            },
        )

        assert response.status_code == 201
        assert response.json()["type"] == "transfer"
        checking_now = (await client.get(f"/v1/accounts/{checking['account_id']}")).json()
        savings_now = (await client.get(f"/v1/accounts/{savings['account_id']}")).json()
        assert checking_now["balance"] == 600
        assert savings_now["balance"] == 400

    @pytest.mark.asyncio
    async def test_insufficient_funds_is_rejected(self, client: AsyncClient):
        checking = await _create_account(client, balance=100)

        response = await client.post(
            "/v1/transactions",
            json={"amount": 150, "type": "expense", "account_id": checking["account_id"]},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "INSUFFICIENT_FUNDS"
        account = (await client.get(f"/v1/accounts/{checking['account_id']}")).json()
        assert account["balance"] == 100

    @pytest.mark.asyncio
    async def test_non_positive_amount_fails_validation(self, client: AsyncClient):
        checking = await _create_account(client)

        response = await client.post(
            "/v1/transactions",
            json={"amount": 0, "type": "expense", "account_id": checking["account_id"]},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_delete_restores_balance(self, client: AsyncClient):
        checking = await _create_account(client)
        posted = await client.post(
            "/v1/transactions",
            json={"amount": 250, "type": "expense", "account_id": checking["account_id"]},
        )

        response = await client.delete(f"/v1/transactions/{posted.json()['transaction_id']}")

        assert response.status_code == 200
        account = (await client.get(f"/v1/accounts/{checking['account_id']}")).json()
        assert account["balance"] == 1000


# =============================================================================
# Installments and card payments
# =============================================================================

class TestInstallmentsApi:
    """Tests for /v1/installments."""

    @pytest.mark.asyncio
    async def test_create_pay_and_delete(self, client: AsyncClient):
        checking = await _create_account(client)
        card = await _create_card(client)

        created = await client.post(
            "/v1/installments",
            json={
                "description": "Phone",
                "total_amount": 1200,
                "installments": 4,
                "purchase_date": "2025-05-15T12:00:00",
                "account_id": card["account_id"],
            },
        )
        assert created.status_code == 201
        installment = created.json()
        assert installment["monthly_payment"] == 300
        assert installment["remaining_amount"] == 1200

        paid = await client.post(
            f"/v1/installments/{installment['installment_id']}/pay",
            json={"amount": 300, "source_account_id": checking["account_id"]},
        )
        assert paid.status_code == 200
        assert paid.json()["paid_installments"] == 1

        deleted = await client.delete(f"/v1/installments/{installment['installment_id']}")
        assert deleted.status_code == 204
        card_now = (await client.get(f"/v1/accounts/{card['account_id']}")).json()
        checking_now = (await client.get(f"/v1/accounts/{checking['account_id']}")).json()
        assert card_now["balance"] == 0
        assert checking_now["balance"] == 1000

    @pytest.mark.asyncio
    async def test_installments_need_a_credit_account(self, client: AsyncClient):
        checking = await _create_account(client)

        response = await client.post(
            "/v1/installments",
            json={
                "description": "Phone",
                "total_amount": 1200,
                "installments": 4,
                "purchase_date": "2025-05-15T12:00:00",
                "account_id": checking["account_id"],
            },
        )

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"


class TestCreditCardPaymentsApi:
    """Tests for /v1/credit-card-payments."""

    @pytest.mark.asyncio
    async def test_current_statement_and_full_payment(self, client: AsyncClient):
        checking = await _create_account(client, balance=5000)
        card = await _create_card(client)
        cycle = get_billing_cycle(20, 5)
        await client.post(
            "/v1/transactions",
            json={
                "amount": 700,
                "type": "expense",
                "account_id": card["account_id"],
                "category_id": "groceries",
                "date": cycle.cycle_start_date.isoformat(),
            },
        )

        response = await client.get(f"/v1/credit-card-payments/statement/{card['account_id']}")

        assert response.status_code == 200
        statement = response.json()
        assert statement["regular_total"] == 700
        assert statement["regular_count"] == 1
        assert statement["regular_charges"][0]["category_name"] == "Groceries"
        assert statement["total_due"] == 700
        assert statement["is_fully_paid"] is False

        paid = await client.post(
            f"/v1/credit-card-payments/pay-statement/{card['account_id']}",
            json={"source_account_id": checking["account_id"]},
        )

        assert paid.status_code == 200
        assert paid.json()["amount"] == 700
        card_now = (await client.get(f"/v1/accounts/{card['account_id']}")).json()
        assert card_now["balance"] == 0

    @pytest.mark.asyncio
    async def test_nothing_due_is_a_conflict(self, client: AsyncClient):
        checking = await _create_account(client)
        card = await _create_card(client)

        response = await client.post(
            f"/v1/credit-card-payments/pay-statement/{card['account_id']}",
            json={"source_account_id": checking["account_id"]},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "NO_BALANCE_DUE"

    @pytest.mark.asyncio
    async def test_statement_of_debit_account_is_not_found(self, client: AsyncClient):
        checking = await _create_account(client)

        response = await client.get(f"/v1/credit-card-payments/statement/{checking['account_id']}")

        assert response.status_code == 404


# =============================================================================
# Recurring transactions
# =============================================================================

class TestRecurringApi:
    """Tests for /v1/recurring."""

    @pytest.mark.asyncio
    async def test_create_process_and_stop(self, client: AsyncClient):
        checking = await _create_account(client)
        start = (datetime.now() - timedelta(days=1)).replace(microsecond=0)

        response = await client.post(
            "/v1/recurring",
            json={
                "description": "Insurance",
                "amount": 250,
                "type": "expense",
                "frequency": "yearly",
                "start_date": start.isoformat(),
                "account_id": checking["account_id"],
            },
        )
        assert response.status_code == 201
        recurring = response.json()
        assert recurring["frequency"] == "yearly"
        assert recurring["is_active"] is True

        response = await client.post("/v1/recurring/process")
        assert response.status_code == 200
        assert response.json() == {"processed": 1, "posted": 1, "failed": 0}
        account = (await client.get(f"/v1/accounts/{checking['account_id']}")).json()
        assert account["balance"] == 750

        response = await client.put(
            f"/v1/recurring/{recurring['recurring_id']}", json={"amount": 300}
        )
        assert response.status_code == 200
        assert response.json()["amount"] == 300

        response = await client.delete(f"/v1/recurring/{recurring['recurring_id']}")
        assert response.status_code == 204
        assert (await client.get("/v1/recurring")).json() == []

    @pytest.mark.asyncio
    async def test_unknown_schedule_is_not_found(self, client: AsyncClient):
        response = await client.get("/v1/recurring/550e8400-e29b-41d4-a716-446655440000")

        assert response.status_code == 404
        assert response.json()["error"] == "RECURRING_TRANSACTION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_transfers_cannot_recur(self, client: AsyncClient):
        checking = await _create_account(client)

        response = await client.post(
            "/v1/recurring",
            json={
                "description": "Savings",
                "amount": 100,
                "type": "transfer",
                "frequency": "monthly",
                "start_date": "2025-06-01T09:00:00",
                "account_id": checking["account_id"],
            },
        )

        assert response.status_code == 400


# =============================================================================
# Financial planning
# =============================================================================

class TestFinancialPlanningApi:
    """Tests for /v1/financial-planning."""

    @pytest.mark.asyncio
    async def test_summary(self, client: AsyncClient):
        await _create_account(client, balance=5000)
        await _create_card(client)

        response = await client.get("/v1/financial-planning/summary", params={"period": "monthly"})

        assert response.status_code == 200
        summary = response.json()
        assert summary["period_type"] == "monthly"
        assert summary["current_balance"] == 5000
        assert summary["current_debt"] == 0
        assert summary["is_sufficient"] is True

    @pytest.mark.asyncio
    async def test_upcoming_days_are_bounded(self, client: AsyncClient):
        response = await client.get("/v1/financial-planning/upcoming", params={"days": 0})

        assert response.status_code == 422

        response = await client.get("/v1/financial-planning/upcoming", params={"days": 14})

        assert response.status_code == 200
        assert response.json()["commitments"] == []

    @pytest.mark.asyncio
    async def test_card_interest(self, client: AsyncClient):
        card = await _create_account(
            client, name="Visa", type="CREDIT", balance=10000, credit_limit=50000,
            cutoff_day=20, payment_day=5,
        )

        response = await client.get(
            f"/v1/financial-planning/card-interest/{card['account_id']}",
            params={"annual_rate": "0.45", "monthly_payment": "1000"},
        )

        assert response.status_code == 200
        projection = response.json()
        assert projection["monthly_interest"] == 375
        assert projection["payoff_months"] == 13
        assert len(projection["amortization"]) == 13

    @pytest.mark.asyncio
    async def test_card_interest_of_debit_account_is_not_found(self, client: AsyncClient):
        checking = await _create_account(client)

        response = await client.get(
            f"/v1/financial-planning/card-interest/{checking['account_id']}",
            params={"annual_rate": "0.45"},
        )

        assert response.status_code == 404


# =============================================================================
# Health and metrics
# =============================================================================

class TestOperationalEndpoints:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_metrics_expose_postings(self, client: AsyncClient):
        checking = await _create_account(client)
        before = REGISTRY.get_sample_value(
            "cardledger_postings_total", {"type": "expense", "outcome": "posted"}
        ) or 0.0
        await client.post(
            "/v1/transactions",
            json={"amount": 10, "type": "expense", "account_id": checking["account_id"]},
        )

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "cardledger_http_requests_total" in response.text
        after = REGISTRY.get_sample_value(
            "cardledger_postings_total", {"type": "expense", "outcome": "posted"}
        )
        assert after == before + 1
