"""Recurring transaction service - schedules and their automatic posting."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

import structlog

from src.application.dto import (
    CreateRecurringRequest,
    PostTransactionRequest,
    RecurringResponse,
    RecurringRunResult,
    UpdateRecurringRequest,
)
from src.core.metrics import track_job_duration
from src.domain.entities import RecurringTransaction
from src.domain.exceptions import (
    AccountNotFoundException,
    RecurringTransactionNotFoundException,
    ValidationException,
)
from src.domain.interfaces import UnitOfWorkFactory
from src.service.billing import to_money
from src.service.billing.dates import end_of_day
from src.service.planning import next_occurrence

from .posting_engine import PostingEngine

logger = structlog.get_logger(__name__)


class RecurringService:
    """
    Application service for recurring income and expense schedules.

    Each due occurrence is posted through the posting engine, so balances
    move exactly as for a transaction entered by hand.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory, engine: PostingEngine):
        self._uow_factory = uow_factory
        self._engine = engine

    async def create_recurring(self, request: CreateRecurringRequest) -> RecurringResponse:
        """
        Schedule a recurring movement; its first occurrence is the start date.

        Raises:
            ValidationException: Invalid amount, description or type
            AccountNotFoundException: If the account is missing or not owned by the user
        """
        errors = request.validate()
        if errors:
            raise ValidationException("; ".join(errors))

        async with self._uow_factory() as uow:
            account = await uow.accounts.get(request.account_id, user_id=request.user_id)
            if account is None:
                raise AccountNotFoundException(str(request.account_id))

            recurring = RecurringTransaction(
                user_id=request.user_id,
                description=request.description.strip(),
                amount=to_money(request.amount),
                type=request.type,
                frequency=request.frequency,
                next_due_date=request.start_date,
                account_id=account.id,
                category_id=request.category_id,
            )
            await uow.recurring.add(recurring)

        logger.info(
            "recurring_created",
            recurring_id=str(recurring.id),
            user_id=request.user_id,
            frequency=recurring.frequency.value,
            amount=str(recurring.amount),
        )
        return RecurringResponse.from_entity(recurring)

    async def list_recurring(self, user_id: str) -> List[RecurringResponse]:
        async with self._uow_factory() as uow:
            schedules = await uow.recurring.list_by_user(user_id)
        return [RecurringResponse.from_entity(r) for r in schedules]

    async def get_recurring(self, user_id: str, recurring_id: UUID) -> RecurringResponse:
        async with self._uow_factory() as uow:
            recurring = await uow.recurring.get(recurring_id, user_id=user_id)
        if recurring is None or not recurring.is_active:
            raise RecurringTransactionNotFoundException(str(recurring_id))
        return RecurringResponse.from_entity(recurring)

    async def update_recurring(
        self,
        user_id: str,
        recurring_id: UUID,
        request: UpdateRecurringRequest,
    ) -> RecurringResponse:
        """Change the description, amount, schedule or category of an active schedule."""
        errors = request.validate()
        if errors:
            raise ValidationException("; ".join(errors))

        async with self._uow_factory() as uow:
            recurring = await uow.recurring.get(recurring_id, user_id=user_id, for_update=True)
            if recurring is None or not recurring.is_active:
                raise RecurringTransactionNotFoundException(str(recurring_id))

            if request.description is not None:
                recurring.description = request.description.strip()
            if request.amount is not None:
                recurring.amount = to_money(request.amount)
            if request.frequency is not None:
                recurring.frequency = request.frequency
            if request.next_due_date is not None:
                recurring.next_due_date = request.next_due_date
            if request.category_id is not None:
                recurring.category_id = request.category_id
            await uow.recurring.update(recurring)

        return RecurringResponse.from_entity(recurring)

    async def delete_recurring(self, user_id: str, recurring_id: UUID) -> None:
        """
        Stop a schedule.

        The row stays, inactive, so transactions it already posted keep
        their link.
        """
        async with self._uow_factory() as uow:
            recurring = await uow.recurring.get(recurring_id, user_id=user_id, for_update=True)
            if recurring is None or not recurring.is_active:
                raise RecurringTransactionNotFoundException(str(recurring_id))
            recurring.is_active = False
            await uow.recurring.update(recurring)

        logger.info("recurring_deactivated", recurring_id=str(recurring_id), user_id=user_id)

    async def process_recurring_transactions(
        self,
        user_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> RecurringRunResult:
        """
        Post every occurrence due by the end of today.

        Each schedule is handled in its own unit of work and catches up on
        every occurrence it missed. An occurrence already settled by a
        linked transaction on its day is skipped. A schedule that fails
        (for example for lack of funds) is logged, counted and left due.

        Args:
            user_id: Restrict to one user, every user when None
            now: Reference instant, defaults to now
        """
        now = now or datetime.now()
        posted = 0
        failed = 0

        with track_job_duration("recurring"):
            async with self._uow_factory() as uow:
                due = await uow.recurring.list_due(end_of_day(now), user_id=user_id)

            for recurring in due:
                log = logger.bind(recurring_id=str(recurring.id), user_id=recurring.user_id)
                try:
                    posted += await self._post_due_occurrences(recurring.id, now)
                except Exception as e:
                    failed += 1
                    log.exception("recurring_processing_failed", error=str(e))

        logger.info(
            "recurring_processing_completed",
            processed=len(due),
            posted=posted,
            failed=failed,
        )
        return RecurringRunResult(processed=len(due), posted=posted, failed=failed)

    async def _post_due_occurrences(self, recurring_id: UUID, now: datetime) -> int:
        until = end_of_day(now)
        posted = 0

        async with self._uow_factory() as uow:
            recurring = await uow.recurring.get(recurring_id, for_update=True)
            if recurring is None or not recurring.is_active:
                return 0

            settled_days = {
                t.date.date() for t in await uow.transactions.list_by_recurring(recurring.id)
            }
            while recurring.next_due_date <= until:
                if recurring.next_due_date.date() not in settled_days:
                    await self._engine.post(
                        uow,
                        PostTransactionRequest(
                            user_id=recurring.user_id,
                            amount=recurring.amount,
                            type=recurring.type,
                            account_id=recurring.account_id,
                            description=recurring.description,
                            date=recurring.next_due_date,
                            category_id=recurring.category_id,
                            recurring_transaction_id=recurring.id,
                        ),
                    )
                    posted += 1
                recurring.next_due_date = next_occurrence(recurring.next_due_date, recurring.frequency)

            recurring.last_run = now
            await uow.recurring.update(recurring)

        return posted
