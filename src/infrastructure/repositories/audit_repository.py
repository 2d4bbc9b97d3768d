"""PostgreSQL implementation of AuditLogRepository."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import AuditLogEntry
from src.domain.interfaces import AuditLogRepository
from src.infrastructure.database.models import AuditLogModel


class PostgresAuditLogRepository(AuditLogRepository):
    """Append-only audit log stored in the ``audit_logs`` table."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, entry: AuditLogEntry) -> AuditLogEntry:
        model = AuditLogModel(
            id=str(entry.id),
            user_id=entry.user_id,
            action=entry.action.value,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            details=entry.details,
            created_at=entry.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return entry
