"""Daily account balance snapshot entity."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4


@dataclass
class AccountSnapshot:
    """Balance of one account at the start of a day."""

    account_id: UUID
    user_id: str
    date: date
    balance: Decimal
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.now)
