"""Notification and claim use cases"""
from .deliver_notification import DeliverNotification
from .broadcast_notification import BroadcastNotification
from .claim_reward import ClaimReward
from .mark_notification_read import MarkNotificationRead, MarkAllNotificationsRead
from .delete_notification import DeleteNotification, DeleteAllNotifications
from .list_notifications import ListNotifications
from .dtos import (
    NotificationPayloadDTO,
    DeliverCommandDTO,
    BroadcastCommandDTO,
    NotificationDTO,
    BroadcastResponseDTO,
    ClaimResponseDTO,
    MarkAllReadResponseDTO,
    ListNotificationsResponseDTO,
    DeleteAllResponseDTO,
)

__all__ = [
    "DeliverNotification",
    "BroadcastNotification",
    "ClaimReward",
    "MarkNotificationRead",
    "MarkAllNotificationsRead",
    "DeleteNotification",
    "DeleteAllNotifications",
    "ListNotifications",
    "NotificationPayloadDTO",
    "DeliverCommandDTO",
    "BroadcastCommandDTO",
    "NotificationDTO",
    "BroadcastResponseDTO",
    "ClaimResponseDTO",
    "MarkAllReadResponseDTO",
    "ListNotificationsResponseDTO",
    "DeleteAllResponseDTO",
]
