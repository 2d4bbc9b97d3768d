"""
Shared fixtures.

Provides:
- In-memory SQLite database with the full schema
- Unit of work factory bound to it
- Application services wired the way the API wires them
- Helpers to open accounts and installment purchases
"""

from datetime import datetime
from decimal import Decimal
from typing import AsyncGenerator, Optional
from uuid import UUID

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.application.dto import CreateAccountRequest, CreateInstallmentRequest
from src.application.services import (
    AccountService,
    InstallmentService,
    PaymentService,
    PlanningService,
    PostingEngine,
    RecurringService,
    SnapshotService,
    StatementService,
    TransactionService,
)
from src.domain.entities import CategoryInfo, UNCATEGORIZED
from src.domain.interfaces import CategoryLookupClient
from src.infrastructure.database import Base
from src.infrastructure.database.unit_of_work import make_uow_factory

USER_ID = "user_1"
OTHER_USER_ID = "user_2"


class StubCategoryClient(CategoryLookupClient):
    """Category lookup answering from a fixed table."""

    def __init__(self, categories: Optional[dict] = None):
        self.categories = categories or {
            "groceries": CategoryInfo(name="Groceries", color="#22c55e", icon="cart"),
        }
        self.calls = 0

    async def get_category(self, category_id: Optional[str]) -> CategoryInfo:
        self.calls += 1
        return self.categories.get(category_id, UNCATEGORIZED)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory test database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture
def uow_factory(session_factory):
    return make_uow_factory(session_factory)


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def category_client() -> StubCategoryClient:
    return StubCategoryClient()


@pytest.fixture
def posting_engine() -> PostingEngine:
    return PostingEngine()


@pytest.fixture
def account_service(uow_factory) -> AccountService:
    return AccountService(uow_factory)


@pytest.fixture
def transaction_service(uow_factory, posting_engine) -> TransactionService:
    return TransactionService(uow_factory, posting_engine)


@pytest.fixture
def installment_service(uow_factory, posting_engine) -> InstallmentService:
    return InstallmentService(uow_factory, posting_engine)


@pytest.fixture
def statement_service(uow_factory, category_client) -> StatementService:
    return StatementService(uow_factory, category_client)


@pytest.fixture
def payment_service(uow_factory, posting_engine) -> PaymentService:
    return PaymentService(uow_factory, posting_engine)


@pytest.fixture
def snapshot_service(uow_factory) -> SnapshotService:
    return SnapshotService(uow_factory)


@pytest.fixture
def recurring_service(uow_factory, posting_engine) -> RecurringService:
    return RecurringService(uow_factory, posting_engine)


@pytest.fixture
def planning_service(uow_factory) -> PlanningService:
    return PlanningService(uow_factory)


# =============================================================================
# Data Helpers
# =============================================================================

@pytest.fixture
def open_account(account_service):
    """Open an account and return its id."""

    async def _open(
        type: str = "DEBIT",
        balance: str = "0",
        name: Optional[str] = None,
        cutoff_day: Optional[int] = None,
        payment_day: Optional[int] = None,
        user_id: str = USER_ID,
    ) -> UUID:
        response = await account_service.create_account(
            CreateAccountRequest(
                user_id=user_id,
                name=name or f"{type.title()} account",
                type=type,
                balance=Decimal(balance),
                credit_limit=Decimal("50000") if type == "CREDIT" else None,
                cutoff_day=cutoff_day,
                payment_day=payment_day,
            )
        )
        return UUID(response.account_id)

    return _open


@pytest.fixture
def open_card(open_account):
    """Open a credit card cutting on the 20th and due on the 5th."""

    async def _open(
        balance: str = "0",
        cutoff_day: int = 20,
        payment_day: int = 5,
        user_id: str = USER_ID,
    ) -> UUID:
        return await open_account(
            type="CREDIT",
            balance=balance,
            name="Gold Card",
            cutoff_day=cutoff_day,
            payment_day=payment_day,
            user_id=user_id,
        )

    return _open


@pytest.fixture
def buy_in_installments(installment_service):
    """Register an installment purchase and return its id."""

    async def _buy(
        card_id: UUID,
        total: str,
        installments: int,
        purchase_date: datetime,
        description: str = "Laptop",
        user_id: str = USER_ID,
    ) -> UUID:
        response = await installment_service.create_installment(
            CreateInstallmentRequest(
                user_id=user_id,
                description=description,
                total_amount=Decimal(total),
                installments=installments,
                purchase_date=purchase_date,
                account_id=card_id,
            )
        )
        return UUID(response.installment_id)

    return _buy


@pytest.fixture
def balance_of(account_service):
    async def _balance(account_id: UUID) -> Decimal:
        return (await account_service.get_account(USER_ID, account_id)).balance

    return _balance


@pytest.fixture
def user_id() -> str:
    return USER_ID


@pytest.fixture
def other_user_id() -> str:
    return OTHER_USER_ID
