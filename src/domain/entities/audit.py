"""Audit log entry entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID, uuid4


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    REVERT = "REVERT"


@dataclass
class AuditLogEntry:
    """Record of a change made to a ledger entity."""

    action: AuditAction
    entity_type: str
    entity_id: str
    user_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.now)
