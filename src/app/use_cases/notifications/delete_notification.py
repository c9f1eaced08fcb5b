"""DeleteNotification / DeleteAllNotifications Use Cases

Owner-only removal. Deleting an unclaimed reward cancels it: no balance
change, and it can no longer be claimed.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.notification_repository import NotificationRepository
from src.domain.change_event import ChangeAction, ChangeEvent
from src.app.use_cases.guards import load_active_account
from .dtos import DeleteAllResponseDTO
from .ownership import load_owned_notification

logger = logging.getLogger(__name__)


class DeleteNotification:
    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        notification_repo: NotificationRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.notification_repo = notification_repo

    async def execute(self, account_id: str, notification_id: str) -> Result[None]:
        try:
            loaded = await load_active_account(self.account_repo, account_id)
            if loaded.is_err():
                return loaded

            owned = await load_owned_notification(self.notification_repo, notification_id, account_id)
            if owned.is_err():
                return owned
            notification = owned.value

            if notification.is_claimable():
                logger.warning(
                    f"Account {account_id} deleted unclaimed reward {notification_id} "
                    f"of {notification.amount} coins"
                )

            await self.notification_repo.delete(notification_id)
            self.uow.record(ChangeEvent.notification_changed(notification, ChangeAction.DELETED))
            await self.uow.commit()

            return Return.ok()

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DELETE_NOTIFICATION_FAILED",
                    message="Failed to delete notification",
                    reason=str(e),
                )
            )


class DeleteAllNotifications:
    """Clear the caller's inbox in one commit"""

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        notification_repo: NotificationRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.notification_repo = notification_repo

    async def execute(self, account_id: str) -> Result[DeleteAllResponseDTO]:
        try:
            loaded = await load_active_account(self.account_repo, account_id)
            if loaded.is_err():
                return loaded

            unclaimed = await self.notification_repo.get_unclaimed_rewards(account_id)
            cancelled_coins = sum(reward.amount for reward in unclaimed)
            if unclaimed:
                logger.warning(
                    f"Account {account_id} deleted {len(unclaimed)} unclaimed rewards "
                    f"of {cancelled_coins} coins"
                )

            removed = await self.notification_repo.delete_all(account_id)
            for notification_id in removed:
                self.uow.record(ChangeEvent.notification_deleted(account_id, notification_id))
            await self.uow.commit()

            return Return.ok(
                DeleteAllResponseDTO(
                    deleted=len(removed),
                    cancelled_rewards=len(unclaimed),
                    cancelled_coins=cancelled_coins,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DELETE_NOTIFICATIONS_FAILED",
                    message="Failed to delete notifications",
                    reason=str(e),
                )
            )
