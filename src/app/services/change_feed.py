"""Change Feed Interface

Per-account stream of committed changes. Consumers subscribe for one
account and receive that account's events in commit order. Subscriptions
are scoped: leaving the context releases the subscriber.
"""

from abc import ABC, abstractmethod
from typing import AsyncContextManager, Optional
from src.domain.change_event import ChangeEvent


class Subscription(ABC):
    """Live view of one account's changes"""

    account_id: str

    def __aiter__(self):
        return self

    async def __anext__(self) -> ChangeEvent:
        event = await self.get()
        if event is None:
            raise StopAsyncIteration
        return event

    @abstractmethod
    async def get(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        """
        Wait for the next event

        Args:
            timeout: Seconds to wait, None waits until an event or close

        Returns:
            The next event, or None on timeout or when the subscription is closed
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Stop the subscription, pending get() calls return None"""
        pass


class ChangeFeed(ABC):

    @abstractmethod
    async def publish(self, event: ChangeEvent) -> None:
        """Deliver a committed event to every subscriber of event.account_id"""
        pass

    @abstractmethod
    def subscribe(self, account_id: str) -> AsyncContextManager[Subscription]:
        """
        Subscribe to one account's changes

        Usage:
            async with change_feed.subscribe(account_id) as subscription:
                async for event in subscription:
                    ...
        """
        pass

    @abstractmethod
    def subscriber_count(self, account_id: Optional[str] = None) -> int:
        """Active subscriptions, for one account or in total"""
        pass
