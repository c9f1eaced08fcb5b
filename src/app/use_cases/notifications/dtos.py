"""Data Transfer Objects for Notification Use Cases"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.coin_transaction import TransactionType
from src.domain.notification import Notification, NotificationType


class NotificationPayloadDTO(BaseModel):
    """
    What gets delivered

    For COIN_REWARD payloads, amount is the claimable coin amount and
    credit_type the transaction type recorded when it is claimed.
    """

    notification_type: NotificationType = Field(..., description="Type of notification")
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    amount: int = Field(default=0, ge=0, description="Reward amount (coin_reward only)")
    credit_type: TransactionType = Field(
        default=TransactionType.ADMIN_CREDIT,
        description="admin_credit or referral"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "notification_type": "coin_reward",
                "title": "Holiday Bonus",
                "message": "Happy holidays! Claim your 25 coins.",
                "amount": 25,
                "credit_type": "admin_credit"
            }
        }


class DeliverCommandDTO(BaseModel):
    """Command DTO for delivering one notification to one account"""

    admin_id: str = Field(..., description="Admin issuing the notification")
    account_id: str = Field(..., description="Recipient account")
    payload: NotificationPayloadDTO


class BroadcastCommandDTO(BaseModel):
    """Command DTO for fanning a notification out to every current account"""

    admin_id: str = Field(..., description="Admin issuing the broadcast")
    payload: NotificationPayloadDTO


class NotificationDTO(BaseModel):
    id: str
    account_id: str
    notification_type: str
    title: str
    message: str
    amount: int
    credit_type: str
    claimed: bool
    read: bool
    broadcast_id: Optional[str] = None
    claimed_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationDTO":
        return cls(
            id=notification.id,
            account_id=notification.account_id,
            notification_type=notification.notification_type.value,
            title=notification.title,
            message=notification.message,
            amount=notification.amount,
            credit_type=notification.credit_type.value,
            claimed=notification.claimed,
            read=notification.read,
            broadcast_id=notification.broadcast_id,
            claimed_at=notification.claimed_at,
            created_at=notification.created_at,
        )


class BroadcastResponseDTO(BaseModel):
    broadcast_id: str = Field(..., description="Shared ID of the fanned-out notifications")
    recipients: int = Field(..., description="Number of notifications created")
    notification_type: str
    amount: int


class ClaimResponseDTO(BaseModel):
    """Response DTO for a successful claim"""

    notification_id: str
    transaction_id: str = Field(..., description="Credit transaction written by the claim")
    amount: int
    balance_after: int
    claimed_at: Optional[datetime] = None


class MarkAllReadResponseDTO(BaseModel):
    updated: int = Field(..., description="Number of notifications newly marked read")


class ListNotificationsResponseDTO(BaseModel):
    """Paginated notifications, newest first"""

    notifications: List[NotificationDTO]
    total: int
    unread_count: int
    limit: int
    offset: int


class DeleteAllResponseDTO(BaseModel):
    deleted: int = Field(..., description="Number of notifications removed")
    cancelled_rewards: int = Field(..., description="Unclaimed coin rewards among them")
    cancelled_coins: int = Field(..., description="Coins those rewards would have credited")
