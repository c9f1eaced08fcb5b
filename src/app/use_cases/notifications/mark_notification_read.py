"""MarkNotificationRead / MarkAllNotificationsRead Use Cases

Both are idempotent: marking an already read notification is a success
that changes nothing.
"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.notification_repository import NotificationRepository
from src.domain.change_event import ChangeAction, ChangeEvent
from src.app.use_cases.guards import load_active_account
from .ownership import load_owned_notification
from .dtos import MarkAllReadResponseDTO, NotificationDTO


class MarkNotificationRead:
    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        notification_repo: NotificationRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.notification_repo = notification_repo

    async def execute(self, account_id: str, notification_id: str) -> Result[NotificationDTO]:
        try:
            loaded = await load_active_account(self.account_repo, account_id)
            if loaded.is_err():
                return loaded

            owned = await load_owned_notification(self.notification_repo, notification_id, account_id)
            if owned.is_err():
                return owned
            notification = owned.value

            if notification.read:
                return Return.ok(NotificationDTO.from_entity(notification))

            await self.notification_repo.mark_read(notification_id)
            self.uow.record(ChangeEvent.notification_changed(notification, ChangeAction.UPDATED))
            await self.uow.commit()

            return Return.ok(NotificationDTO.from_entity(notification))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="MARK_READ_FAILED",
                    message="Failed to mark notification as read",
                    reason=str(e),
                )
            )


class MarkAllNotificationsRead:
    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        notification_repo: NotificationRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.notification_repo = notification_repo

    async def execute(self, account_id: str) -> Result[MarkAllReadResponseDTO]:
        try:
            loaded = await load_active_account(self.account_repo, account_id)
            if loaded.is_err():
                return loaded

            changed = await self.notification_repo.mark_all_read(account_id)
            for notification_id in changed:
                self.uow.record(ChangeEvent.notification_read(account_id, notification_id))
            await self.uow.commit()

            return Return.ok(MarkAllReadResponseDTO(updated=len(changed)))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="MARK_ALL_READ_FAILED",
                    message="Failed to mark notifications as read",
                    reason=str(e),
                )
            )
