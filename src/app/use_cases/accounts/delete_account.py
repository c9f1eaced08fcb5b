"""DeleteAccount Use Case

Irreversibly removes an account with all its transactions and
notifications. Allowed for an admin, or for the account itself.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.coin_transaction_repository import CoinTransactionRepository
from src.app.repositories.notification_repository import NotificationRepository
from src.domain.change_event import ChangeEvent
from src.app.use_cases.guards import account_not_found

logger = logging.getLogger(__name__)


class DeleteAccount:
    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        transaction_repo: CoinTransactionRepository,
        notification_repo: NotificationRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.notification_repo = notification_repo

    async def execute(self, actor_id: str, account_id: str) -> Result[None]:
        try:
            actor = await self.account_repo.get_by_id(actor_id)
            if not actor:
                return Return.err(
                    Error(
                        code="UNAUTHORIZED",
                        message="Unknown account",
                        reason=f"account_id={actor_id}",
                    )
                )

            # Self-service deletion is allowed even while suspended
            if actor.id != account_id and not (actor.is_admin() and actor.is_active()):
                return Return.err(
                    Error(
                        code="FORBIDDEN",
                        message="Only admins can delete other accounts",
                        reason=f"actor_id={actor_id}, account_id={account_id}",
                    )
                )

            account = await self.account_repo.get_by_id(account_id, for_update=True)
            if not account:
                return Return.err(account_not_found(account_id))

            notifications = await self.notification_repo.delete_by_account_id(account_id)
            transactions = await self.transaction_repo.delete_by_account_id(account_id)
            await self.account_repo.delete(account_id)

            self.uow.record(ChangeEvent.account_deleted(account_id))
            await self.uow.commit()

            logger.info(
                f"Deleted account {account_id} by {actor_id} "
                f"({transactions} transactions, {notifications} notifications)"
            )
            return Return.ok()

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DELETE_ACCOUNT_FAILED",
                    message="Failed to delete account",
                    reason=str(e),
                )
            )
