"""Ledger posting

Applies one balance change and appends its transaction inside the caller's
unit of work. Does not commit: the calling use case decides when the whole
unit lands.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.coin_transaction_repository import CoinTransactionRepository
from src.domain.change_event import ChangeEvent
from src.domain.coin_transaction import CoinTransaction, TransactionType
from src.app.use_cases.guards import account_not_found

logger = logging.getLogger(__name__)


class LedgerPoster:
    """
    Posts balance changes with their transaction records

    Business Rules:
    1. amount must be > 0; the sign comes from the direction
    2. Credit types only credit, debit types only debit
    3. A debit that would make the balance negative writes nothing
    4. Balance change and transaction are staged in the same unit of work
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        transaction_repo: CoinTransactionRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def credit(
        self,
        account_id: str,
        amount: int,
        transaction_type: TransactionType,
        description: str = "",
        counterparty: Optional[str] = None,
        reference_type: Optional[str] = None,
        reference_id: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> Result[CoinTransaction]:
        if not transaction_type.is_credit():
            return Return.err(
                Error(
                    code="INVALID_TRANSACTION_TYPE",
                    message=f"{transaction_type.value} is not a credit type",
                )
            )
        return await self._post(
            account_id,
            amount,
            amount,
            transaction_type,
            description,
            counterparty,
            reference_type,
            reference_id,
            idempotency_key,
        )

    async def debit(
        self,
        account_id: str,
        amount: int,
        transaction_type: TransactionType,
        description: str = "",
        counterparty: Optional[str] = None,
        reference_type: Optional[str] = None,
        reference_id: Optional[str] = None,
        idempotency_key: Optional[str] = None,
        count_call: bool = False,
    ) -> Result[CoinTransaction]:
        if not transaction_type.is_debit():
            return Return.err(
                Error(
                    code="INVALID_TRANSACTION_TYPE",
                    message=f"{transaction_type.value} is not a debit type",
                )
            )
        return await self._post(
            account_id,
            amount,
            -amount,
            transaction_type,
            description,
            counterparty,
            reference_type,
            reference_id,
            idempotency_key,
            count_call=count_call,
        )

    async def _post(
        self,
        account_id: str,
        amount: int,
        delta: int,
        transaction_type: TransactionType,
        description: str,
        counterparty: Optional[str],
        reference_type: Optional[str],
        reference_id: Optional[str],
        idempotency_key: Optional[str],
        count_call: bool = False,
    ) -> Result[CoinTransaction]:
        if amount <= 0:
            return Return.err(
                Error(
                    code="INVALID_AMOUNT",
                    message="Amount must be greater than zero",
                    reason=f"amount={amount}",
                )
            )

        new_balance = await self.account_repo.apply_balance_delta(
            account_id, delta, count_call=count_call
        )

        if new_balance is None:
            # Guarded update matched nothing: either no row or not enough funds
            account = await self.account_repo.get_by_id(account_id)
            if not account:
                return Return.err(account_not_found(account_id))

            logger.warning(
                f"Rejected {transaction_type.value} of {amount} for account {account_id}: "
                f"balance {account.balance}"
            )
            return Return.err(
                Error(
                    code="INSUFFICIENT_BALANCE",
                    message=f"Insufficient balance. Required: {amount}, Available: {account.balance}",
                    reason=f"balance={account.balance}, required={amount}",
                )
            )

        transaction = CoinTransaction(
            account_id=account_id,
            transaction_type=transaction_type,
            amount=delta,
            balance_before=new_balance - delta,
            balance_after=new_balance,
            description=description,
            counterparty=counterparty,
            reference_type=reference_type,
            reference_id=reference_id,
            idempotency_key=idempotency_key,
        )
        created = await self.transaction_repo.create(transaction)

        self.uow.record(ChangeEvent.transaction_created(created))
        account = await self.account_repo.get_by_id(account_id)
        if account:
            self.uow.record(ChangeEvent.account_updated(account))

        return Return.ok(created)
