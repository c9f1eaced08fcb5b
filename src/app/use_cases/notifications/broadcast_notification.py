"""BroadcastNotification Use Case

Fans a notification out to a snapshot of all current accounts.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.notification_repository import NotificationRepository
from src.domain.base import generate_uuid
from src.domain.change_event import ChangeAction, ChangeEvent
from src.app.use_cases.guards import load_admin
from .deliver_notification import build_notification, validate_payload
from .dtos import BroadcastCommandDTO, BroadcastResponseDTO

logger = logging.getLogger(__name__)


class BroadcastNotification:
    """
    Use Case: Broadcast (and bulk coin grant when the payload is a reward)

    Business Rules:
    1. Caller must be an active admin
    2. Recipients are the accounts existing when the broadcast runs;
       accounts created later do not receive it
    3. One independent notification per account, all sharing broadcast_id
    4. All notifications are committed together or none are
    5. Rewards are created unclaimed; no balance changes
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

    async def execute(self, command: BroadcastCommandDTO) -> Result[BroadcastResponseDTO]:
        try:
            # Step 1: Authorize and validate
            admin = await load_admin(self.account_repo, command.admin_id)
            if admin.is_err():
                return admin

            valid = validate_payload(command.payload)
            if valid.is_err():
                return valid

            # Step 2: Snapshot recipients
            account_ids = await self.account_repo.list_ids()
            broadcast_id = generate_uuid()

            # Step 3: Fan out in one batch
            notifications = [
                build_notification(
                    account_id,
                    command.payload,
                    broadcast_id=broadcast_id,
                    created_by=command.admin_id,
                )
                for account_id in account_ids
            ]
            created = await self.notification_repo.create_many(notifications)
            for notification in created:
                self.uow.record(ChangeEvent.notification_changed(notification, ChangeAction.CREATED))

            # Step 4: Commit all or nothing
            await self.uow.commit()

            logger.info(
                f"Broadcast {broadcast_id} ({command.payload.notification_type.value}) "
                f"sent to {len(created)} accounts"
            )
            return Return.ok(
                BroadcastResponseDTO(
                    broadcast_id=broadcast_id,
                    recipients=len(created),
                    notification_type=command.payload.notification_type.value,
                    amount=command.payload.amount,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Broadcast failed, nothing was sent: {e}")
            return Return.err(
                Error(
                    code="BROADCAST_FAILED",
                    message="Failed to broadcast notification",
                    reason=str(e),
                )
            )
