"""CreditCoins Use Case

Adds coins to an account and appends the matching transaction.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.coin_transaction_repository import CoinTransactionRepository
from .dtos import CreditCommandDTO, CoinTransactionResponseDTO
from .posting import LedgerPoster

logger = logging.getLogger(__name__)


class CreditCoins:
    """
    Use Case: Credit coins to an account

    Business Rules:
    1. amount > 0 and transaction_type is a credit type
    2. Idempotency: a repeated idempotency_key returns the first transaction
    3. Balance and transaction are committed together

    Flow:
    1. Check idempotency (return existing if found)
    2. Post the credit (guarded balance update + transaction)
    3. Commit
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
        self.poster = LedgerPoster(uow, account_repo, transaction_repo)

    async def execute(self, command: CreditCommandDTO) -> Result[CoinTransactionResponseDTO]:
        try:
            # Step 1: Idempotent replay
            if command.idempotency_key:
                existing = await self.transaction_repo.get_by_idempotency_key(
                    command.idempotency_key
                )
                if existing:
                    return Return.ok(CoinTransactionResponseDTO.from_entity(existing))

            # Step 2: Post the credit
            posted = await self.poster.credit(
                command.account_id,
                command.amount,
                command.transaction_type,
                description=command.description,
                counterparty=command.counterparty,
                reference_type=command.reference_type,
                reference_id=command.reference_id,
                idempotency_key=command.idempotency_key,
            )
            if posted.is_err():
                await self.uow.rollback()
                return posted

            # Step 3: Commit
            await self.uow.commit()

            logger.info(
                f"Credited {command.amount} coins ({command.transaction_type.value}) "
                f"to account {command.account_id}"
            )
            return Return.ok(CoinTransactionResponseDTO.from_entity(posted.value))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREDIT_FAILED",
                    message="Failed to credit coins",
                    reason=str(e),
                )
            )
