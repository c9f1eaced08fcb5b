"""ChargeApiCall Use Case

Billing gateway contract: charge one served third-party API call to the
account owning the presented API key.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.coin_transaction_repository import CoinTransactionRepository
from src.domain.coin_transaction import TransactionType
from src.domain.system_settings import SystemSettings
from .dtos import ChargeApiCallCommandDTO, CoinTransactionResponseDTO
from .posting import LedgerPoster

logger = logging.getLogger(__name__)


class ChargeApiCall:
    """
    Use Case: Charge an API call

    Business Rules:
    1. The key must resolve to an account (INVALID_API_KEY)
    2. Paused keys and suspended accounts are refused and nothing is written
    3. cost_per_call is debited and total_calls incremented in one guarded update
    4. A usage transaction referencing the endpoint is appended
    5. Idempotency: a repeated idempotency_key returns the first charge

    Flow:
    1. Resolve API key
    2. Check key and account state
    3. Check idempotency
    4. Debit with call count
    5. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        transaction_repo: CoinTransactionRepository,
        settings: SystemSettings,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.settings = settings
        self.poster = LedgerPoster(uow, account_repo, transaction_repo)

    async def execute(self, command: ChargeApiCallCommandDTO) -> Result[CoinTransactionResponseDTO]:
        try:
            # Step 1: Resolve key
            account = await self.account_repo.get_by_api_key(command.api_key)
            if not account:
                return Return.err(
                    Error(
                        code="INVALID_API_KEY",
                        message="API key is not valid",
                    )
                )

            # Step 2: Key and account state
            if account.api_key_paused:
                return Return.err(
                    Error(
                        code="API_KEY_PAUSED",
                        message="API key is paused",
                        reason=f"account_id={account.id}",
                    )
                )
            if not account.is_active():
                return Return.err(
                    Error(
                        code="ACCOUNT_SUSPENDED",
                        message="Account is suspended",
                        reason=f"account_id={account.id}",
                    )
                )

            # Step 3: Idempotent replay
            if command.idempotency_key:
                existing = await self.transaction_repo.get_by_idempotency_key(
                    command.idempotency_key
                )
                if existing:
                    if existing.account_id != account.id:
                        return Return.err(
                            Error(
                                code="IDEMPOTENCY_KEY_CONFLICT",
                                message="Idempotency key was used by another account",
                            )
                        )
                    return Return.ok(CoinTransactionResponseDTO.from_entity(existing))

            # Step 4: Debit cost and count the call
            posted = await self.poster.debit(
                account.id,
                self.settings.cost_per_call,
                TransactionType.USAGE,
                description=f"API call: {command.endpoint}",
                reference_type="api_call",
                reference_id=command.endpoint,
                idempotency_key=command.idempotency_key,
                count_call=True,
            )
            if posted.is_err():
                await self.uow.rollback()
                return posted

            # Step 5: Commit
            await self.uow.commit()

            logger.info(
                f"Charged {self.settings.cost_per_call} coins to account {account.id} "
                f"for {command.endpoint}"
            )
            return Return.ok(CoinTransactionResponseDTO.from_entity(posted.value))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CHARGE_FAILED",
                    message="Failed to charge API call",
                    reason=str(e),
                )
            )
