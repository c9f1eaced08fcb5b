"""Lookup of a notification on behalf of its owner"""

from libs.result import Result, Return, Error
from src.app.repositories.notification_repository import NotificationRepository
from src.domain.notification import Notification


async def load_owned_notification(
    notification_repo: NotificationRepository, notification_id: str, account_id: str
) -> Result[Notification]:
    # Someone else's notification is reported as missing
    notification = await notification_repo.get_by_id(notification_id)
    if not notification or notification.account_id != account_id:
        return Return.err(
            Error(
                code="NOTIFICATION_NOT_FOUND",
                message=f"Notification {notification_id} not found",
            )
        )
    return Return.ok(notification)
