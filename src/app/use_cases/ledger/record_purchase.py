"""RecordPurchase Use Case

Credits a paid coin package straight to the balance. Unlike admin rewards
it needs no claim, and its transaction is referenced as a purchase.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.coin_transaction_repository import CoinTransactionRepository
from src.domain.coin_transaction import TransactionType
from src.app.use_cases.guards import load_admin
from .dtos import PurchaseCommandDTO, CoinTransactionResponseDTO
from .posting import LedgerPoster

logger = logging.getLogger(__name__)


class RecordPurchase:
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

    async def execute(self, command: PurchaseCommandDTO) -> Result[CoinTransactionResponseDTO]:
        try:
            admin = await load_admin(self.account_repo, command.admin_id)
            if admin.is_err():
                return admin

            posted = await self.poster.credit(
                command.account_id,
                command.amount,
                TransactionType.PURCHASE,
                description=command.description,
                reference_type="purchase",
                reference_id=command.reference_id,
            )
            if posted.is_err():
                await self.uow.rollback()
                return posted

            await self.uow.commit()

            logger.info(
                f"Recorded purchase of {command.amount} coins for account {command.account_id}"
            )
            return Return.ok(CoinTransactionResponseDTO.from_entity(posted.value))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="RECORD_PURCHASE_FAILED",
                    message="Failed to record purchase",
                    reason=str(e),
                )
            )
