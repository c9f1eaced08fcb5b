"""Notification Repository Interface

Defines the contract for notification persistence and the claim transition.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from src.domain.notification import Notification


class NotificationRepository(ABC):
    """
    Repository interface for Notification persistence

    mark_claimed is a conditional update guarded by claimed = False. Exactly
    one caller can win it for a given notification.
    """

    @abstractmethod
    async def create(self, notification: Notification) -> Notification:
        """Persist one notification"""
        pass

    @abstractmethod
    async def create_many(self, notifications: List[Notification]) -> List[Notification]:
        """Persist a fan-out batch (committed or rolled back as a whole by the caller)"""
        pass

    @abstractmethod
    async def get_by_id(self, notification_id: str) -> Optional[Notification]:
        """Retrieve notification by ID"""
        pass

    @abstractmethod
    async def get_by_account_id(
        self,
        account_id: str,
        limit: int = 50,
        offset: int = 0,
        unread_only: bool = False,
        rewards_only: bool = False,
    ) -> Tuple[List[Notification], int]:
        """
        Page through an account's notifications, newest first

        Returns:
            (notifications, total matching count)
        """
        pass

    @abstractmethod
    async def count_unread(self, account_id: str) -> int:
        """Number of unread notifications of an account"""
        pass

    @abstractmethod
    async def mark_read(self, notification_id: str) -> None:
        """Set read = True (idempotent)"""
        pass

    @abstractmethod
    async def mark_all_read(self, account_id: str) -> List[str]:
        """Set read = True on every unread notification, returns the IDs changed"""
        pass

    @abstractmethod
    async def mark_claimed(self, notification_id: str) -> bool:
        """
        Conditionally flip claimed False -> True (and read -> True)

        Returns:
            True if this call performed the transition, False if the
            notification was already claimed (or is not a reward)
        """
        pass

    @abstractmethod
    async def delete(self, notification_id: str) -> None:
        """Delete one notification"""
        pass

    @abstractmethod
    async def delete_by_account_id(self, account_id: str) -> int:
        """Remove all notifications of an account, returns the number removed"""
        pass

    @abstractmethod
    async def get_unclaimed_rewards(self, account_id: str) -> List[Notification]:
        """Coin rewards of an account that have not been claimed yet"""
        pass

    @abstractmethod
    async def delete_all(self, account_id: str) -> List[str]:
        """Delete every notification of an account, returns the IDs removed"""
        pass
