"""Transaction service - posting, listing and deleting ledger movements."""

from typing import List, Optional
from uuid import UUID

import structlog

from src.application.dto import PostTransactionRequest, TransactionResponse
from src.domain.entities import TransactionType
from src.domain.exceptions import TransactionNotFoundException, ValidationException
from src.domain.interfaces import UnitOfWorkFactory

from .posting_engine import PostingEngine

logger = structlog.get_logger(__name__)


class TransactionService:
    """
    Application service for ledger movement use cases.

    Each call runs in its own unit of work.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory, engine: PostingEngine):
        self._uow_factory = uow_factory
        self._engine = engine

    async def post_transaction(self, request: PostTransactionRequest) -> TransactionResponse:
        """
        Post an income, expense or transfer.

        Args:
            request: The movement to post

        Returns:
            TransactionResponse for the created transaction
        """
        async with self._uow_factory() as uow:
            transaction = await self._engine.post(uow, request)
        return TransactionResponse.from_entity(transaction)

    async def get_transaction(self, user_id: str, transaction_id: UUID) -> TransactionResponse:
        """
        Retrieve a non-deleted transaction.

        Raises:
            TransactionNotFoundException: If missing, deleted or not owned by the user
        """
        async with self._uow_factory() as uow:
            transaction = await uow.transactions.get(transaction_id, user_id=user_id)
        if transaction is None or transaction.is_deleted:
            raise TransactionNotFoundException(str(transaction_id))
        return TransactionResponse.from_entity(transaction)

    async def list_transactions(
        self,
        user_id: str,
        account_id: Optional[UUID] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[TransactionResponse]:
        async with self._uow_factory() as uow:
            transactions = await uow.transactions.list_by_user(
                user_id,
                account_id=account_id,
                limit=limit,
                offset=offset,
            )
        return [TransactionResponse.from_entity(t) for t in transactions]

    async def delete_transaction(self, user_id: str, transaction_id: UUID) -> TransactionResponse:
        """
        Reverse a transaction and mark it deleted.

        The originating charge of an installment plan cannot be deleted on
        its own; the plan has to be deleted instead.

        Raises:
            TransactionNotFoundException: If missing, deleted or not owned by the user
            ValidationException: If the transaction is an installment plan charge
        """
        async with self._uow_factory() as uow:
            transaction = await uow.transactions.get(transaction_id, user_id=user_id)
            if transaction is None or transaction.is_deleted:
                raise TransactionNotFoundException(str(transaction_id))

            if (
                transaction.type == TransactionType.EXPENSE
                and transaction.installment_purchase_id is not None
            ):
                raise ValidationException(
                    "Installment purchase charges cannot be deleted; delete the purchase instead",
                    field="installment_purchase_id",
                )

            await self._engine.reverse(uow, transaction, revert_installment=True)

        logger.info(
            "transaction_deleted",
            transaction_id=str(transaction_id),
            user_id=user_id,
        )
        return TransactionResponse.from_entity(transaction)
