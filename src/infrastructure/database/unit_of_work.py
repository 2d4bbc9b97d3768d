"""SQLAlchemy implementation of the unit of work."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.domain.interfaces import UnitOfWork
from src.infrastructure.repositories import (
    PostgresAccountRepository,
    PostgresAuditLogRepository,
    PostgresInstallmentRepository,
    PostgresRecurringTransactionRepository,
    PostgresSnapshotRepository,
    PostgresStatementRepository,
    PostgresTransactionRepository,
)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    One AsyncSession, one database transaction.

    Repositories share the session, so every read and write made through
    them inside the ``async with`` block commits or rolls back together.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    async def __aenter__(self) -> "SqlAlchemyUnitOfWork":
        self._session = self._session_factory()
        self.accounts = PostgresAccountRepository(self._session)
        self.transactions = PostgresTransactionRepository(self._session)
        self.installments = PostgresInstallmentRepository(self._session)
        self.recurring = PostgresRecurringTransactionRepository(self._session)
        self.statements = PostgresStatementRepository(self._session)
        self.audit_logs = PostgresAuditLogRepository(self._session)
        self.snapshots = PostgresSnapshotRepository(self._session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            await self._session.close()
            self._session = None

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()


def make_uow_factory(session_factory: async_sessionmaker[AsyncSession]):
    """Build a zero-argument callable returning fresh units of work."""

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(session_factory)

    return factory
