"""DeliverNotification Use Case

Admin sends one notification to one account. Reward notifications are
created unclaimed and do not touch the balance.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.notification_repository import NotificationRepository
from src.domain.change_event import ChangeAction, ChangeEvent
from src.domain.coin_transaction import TransactionType
from src.domain.notification import Notification, NotificationType
from src.app.use_cases.guards import load_admin, account_not_found
from .dtos import DeliverCommandDTO, NotificationDTO, NotificationPayloadDTO

logger = logging.getLogger(__name__)

# Other credit types belong to their own flows (signup, transfer, purchase)
REWARD_CREDIT_TYPES = frozenset({TransactionType.ADMIN_CREDIT, TransactionType.REFERRAL})


def validate_payload(payload: NotificationPayloadDTO) -> Result[None]:
    """Reward payloads need a positive amount and a credit transaction type"""
    if payload.notification_type != NotificationType.COIN_REWARD:
        return Return.ok()
    if payload.amount <= 0:
        return Return.err(
            Error(
                code="INVALID_AMOUNT",
                message="Coin reward amount must be greater than zero",
                reason=f"amount={payload.amount}",
            )
        )
    if payload.credit_type not in REWARD_CREDIT_TYPES:
        return Return.err(
            Error(
                code="INVALID_TRANSACTION_TYPE",
                message=f"{payload.credit_type.value} cannot be used for a reward",
            )
        )
    return Return.ok()


def build_notification(account_id: str, payload: NotificationPayloadDTO, **extra) -> Notification:
    return Notification(
        account_id=account_id,
        notification_type=payload.notification_type,
        title=payload.title,
        message=payload.message,
        amount=payload.amount if payload.notification_type == NotificationType.COIN_REWARD else 0,
        credit_type=payload.credit_type,
        **extra,
    )


class DeliverNotification:
    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        notification_repo: NotificationRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.notification_repo = notification_repo

    async def execute(self, command: DeliverCommandDTO) -> Result[NotificationDTO]:
        try:
            admin = await load_admin(self.account_repo, command.admin_id)
            if admin.is_err():
                return admin

            valid = validate_payload(command.payload)
            if valid.is_err():
                return valid

            account = await self.account_repo.get_by_id(command.account_id)
            if not account:
                return Return.err(account_not_found(command.account_id))

            notification = await self.notification_repo.create(
                build_notification(account.id, command.payload, created_by=command.admin_id)
            )
            self.uow.record(ChangeEvent.notification_changed(notification, ChangeAction.CREATED))

            await self.uow.commit()

            logger.info(
                f"Delivered {notification.notification_type.value} notification "
                f"{notification.id} to account {account.id}"
            )
            return Return.ok(NotificationDTO.from_entity(notification))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DELIVER_NOTIFICATION_FAILED",
                    message="Failed to deliver notification",
                    reason=str(e),
                )
            )
