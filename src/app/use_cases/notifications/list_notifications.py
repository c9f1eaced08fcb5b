"""
List Notifications Use Case

Newest first, with the unread count for the notification badge.
"""
from libs.result import Result, Return
from src.app.repositories.notification_repository import NotificationRepository
from .dtos import ListNotificationsResponseDTO, NotificationDTO


class ListNotifications:
    def __init__(self, notification_repo: NotificationRepository):
        self.notification_repo = notification_repo

    async def execute(
        self,
        account_id: str,
        limit: int = 50,
        offset: int = 0,
        unread_only: bool = False,
        rewards_only: bool = False,
    ) -> Result[ListNotificationsResponseDTO]:
        notifications, total = await self.notification_repo.get_by_account_id(
            account_id,
            limit=limit,
            offset=offset,
            unread_only=unread_only,
            rewards_only=rewards_only,
        )
        unread_count = await self.notification_repo.count_unread(account_id)

        return Return.ok(
            ListNotificationsResponseDTO(
                notifications=[NotificationDTO.from_entity(n) for n in notifications],
                total=total,
                unread_count=unread_count,
                limit=limit,
                offset=offset,
            )
        )
