"""Notification Domain Entity

Messages delivered to an account. Coin rewards carry a one-time claim.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, BigInteger, String, Text
from src.domain.base import BaseModel, generate_uuid
from src.domain.coin_transaction import TransactionType


class NotificationType(str, Enum):
    """Notification types"""
    COIN_REWARD = "coin_reward"      # Claimable coins
    ANNOUNCEMENT = "announcement"    # Admin or system announcement
    WARNING = "warning"              # Deductions, suspensions
    INFO = "info"                    # Informational (transfers received, activation)


class Notification(BaseModel, table=True):
    """
    Notification - Message to an account, optionally carrying a coin reward

    Domain Rules:
    - Only COIN_REWARD notifications can be claimed
    - claimed goes False -> True at most once (terminal)
    - Delivering a reward does not touch the balance; claiming it does
    - read is idempotent and independent of claimed
    - A broadcast creates one notification per account sharing broadcast_id
    """

    __tablename__ = "notifications"
    __table_args__ = (
        Index('ix_notifications_account_created', 'account_id', 'created_at'),
        Index('ix_notifications_broadcast_id', 'broadcast_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique notification identifier"
    )

    account_id: str = Field(
        sa_column=Column(String, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False),
        description="Recipient account"
    )

    notification_type: NotificationType = Field(
        description="Type of notification"
    )

    title: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Notification title"
    )

    message: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Notification body"
    )

    amount: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Reward amount (COIN_REWARD only)"
    )

    credit_type: TransactionType = Field(
        default=TransactionType.ADMIN_CREDIT,
        description="Transaction type written when the reward is claimed"
    )

    claimed: bool = Field(
        default=False,
        description="Whether the reward was claimed (terminal once True)"
    )

    read: bool = Field(
        default=False,
        description="Whether the recipient has seen the notification"
    )

    broadcast_id: Optional[str] = Field(
        default=None,
        description="Shared ID of all notifications of one broadcast"
    )

    created_by: Optional[str] = Field(
        default=None,
        description="Admin account ID, or None for system notifications"
    )

    claimed_at: Optional[datetime] = Field(
        default=None,
        description="When the reward was claimed"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Delivery timestamp"
    )

    def is_reward(self) -> bool:
        return self.notification_type == NotificationType.COIN_REWARD

    def is_claimable(self) -> bool:
        return self.is_reward() and self.amount > 0 and not self.claimed

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "5e6f7a8b-9c0d-4e1f-a2b3-c4d5e6f7a8b9",
                "account_id": "0b6d7f3e-5c1a-4e7b-9a57-1f2d3c4b5a69",
                "notification_type": "coin_reward",
                "title": "Coin Reward from Admin",
                "message": "You have received 50 coins from admin. Click to claim!",
                "amount": 50,
                "credit_type": "admin_credit",
                "claimed": False,
                "read": False,
                "broadcast_id": None,
                "created_by": "admin-account-id",
                "claimed_at": None,
                "created_at": "2024-01-01T00:00:00Z"
            }
        }
