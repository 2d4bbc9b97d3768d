"""Account service - opening, listing and closing accounts."""

from typing import List
from uuid import UUID

import structlog

from src.application.dto import (
    AccountDeletionResult,
    AccountResponse,
    CreateAccountRequest,
)
from src.domain.entities import Account, AccountType
from src.domain.exceptions import AccountNotFoundException, ValidationException
from src.domain.interfaces import UnitOfWorkFactory
from src.service.billing import to_money

logger = structlog.get_logger(__name__)


class AccountService:
    """
    Application service for account use cases.

    Balances are never edited here; only the opening balance is set.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    async def create_account(self, request: CreateAccountRequest) -> AccountResponse:
        """
        Open an account.

        Raises:
            ValidationException: Unknown type, or a credit card without valid days
        """
        errors = request.validate()
        if errors:
            raise ValidationException("; ".join(errors))

        account_type = AccountType.normalize(request.type)
        is_credit = account_type == AccountType.CREDIT
        account = Account(
            user_id=request.user_id,
            name=request.name.strip(),
            type=account_type,
            balance=to_money(request.balance),
            credit_limit=to_money(request.credit_limit) if request.credit_limit is not None else None,
            cutoff_day=request.cutoff_day if is_credit else None,
            payment_day=request.payment_day if is_credit else None,
        )

        async with self._uow_factory() as uow:
            await uow.accounts.add(account)

        logger.info(
            "account_created",
            account_id=str(account.id),
            user_id=account.user_id,
            type=account.type.value,
        )
        return AccountResponse.from_entity(account)

    async def list_accounts(
        self,
        user_id: str,
        include_archived: bool = False,
    ) -> List[AccountResponse]:
        async with self._uow_factory() as uow:
            accounts = await uow.accounts.list_by_user(user_id, include_archived=include_archived)
        return [AccountResponse.from_entity(a) for a in accounts]

    async def get_account(self, user_id: str, account_id: UUID) -> AccountResponse:
        async with self._uow_factory() as uow:
            account = await uow.accounts.get(account_id, user_id=user_id)
        if account is None:
            raise AccountNotFoundException(str(account_id))
        return AccountResponse.from_entity(account)

    async def delete_account(self, user_id: str, account_id: UUID) -> AccountDeletionResult:
        """
        Delete an account, or archive it when ledger history points at it.

        Raises:
            AccountNotFoundException: If missing or not owned by the user
        """
        async with self._uow_factory() as uow:
            account = await uow.accounts.get(account_id, user_id=user_id, for_update=True)
            if account is None:
                raise AccountNotFoundException(str(account_id))

            if await uow.accounts.is_referenced(account_id):
                account.is_archived = True
                await uow.accounts.update(account)
                result = AccountDeletionResult(str(account_id), deleted=False, archived=True)
            else:
                await uow.accounts.delete(account_id)
                result = AccountDeletionResult(str(account_id), deleted=True, archived=False)

        logger.info(
            "account_deleted",
            account_id=str(account_id),
            user_id=user_id,
            archived=result.archived,
        )
        return result
