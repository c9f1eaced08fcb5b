"""SetAccountStatus Use Case

Admin suspends or re-activates an account and tells the user why.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.notification_repository import NotificationRepository
from src.domain.account import AccountStatus
from src.domain.change_event import ChangeAction, ChangeEvent
from src.domain.notification import Notification, NotificationType
from src.app.use_cases.guards import load_admin, account_not_found
from .dtos import AccountDTO

logger = logging.getLogger(__name__)


class SetAccountStatus:
    """
    Use Case: Change account status

    Business Rules:
    1. Admin only
    2. Suspension delivers a warning, re-activation an info notification
    3. Setting the current status again changes nothing and notifies nobody
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        notification_repo: NotificationRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.notification_repo = notification_repo

    async def execute(self, admin_id: str, account_id: str, status: AccountStatus) -> Result[AccountDTO]:
        try:
            admin = await load_admin(self.account_repo, admin_id)
            if admin.is_err():
                return admin

            account = await self.account_repo.get_by_id(account_id, for_update=True)
            if not account:
                return Return.err(account_not_found(account_id))

            if account.status == status:
                return Return.ok(AccountDTO.from_entity(account))

            account.status = status
            await self.account_repo.save(account)

            if status == AccountStatus.SUSPENDED:
                notification = Notification(
                    account_id=account.id,
                    notification_type=NotificationType.WARNING,
                    title="Account Suspended",
                    message="Your account has been suspended. Contact support for details.",
                    created_by=admin_id,
                )
            else:
                notification = Notification(
                    account_id=account.id,
                    notification_type=NotificationType.INFO,
                    title="Account Activated",
                    message="Your account is active again. Welcome back!",
                    created_by=admin_id,
                )
            created = await self.notification_repo.create(notification)

            self.uow.record(ChangeEvent.account_updated(account))
            self.uow.record(ChangeEvent.notification_changed(created, ChangeAction.CREATED))
            await self.uow.commit()

            logger.info(f"Admin {admin_id} set account {account.id} status to {status.value}")
            return Return.ok(AccountDTO.from_entity(account))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SET_STATUS_FAILED",
                    message="Failed to change account status",
                    reason=str(e),
                )
            )
