"""In-process Change Feed

Fan-out of committed change events to asyncio queues, one per subscriber.
Events are delivered in publish order, which is commit order within the
process.
"""

import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional, Set
from src.app.services.change_feed import ChangeFeed, Subscription
from src.domain.change_event import ChangeEvent

logger = logging.getLogger(__name__)


class QueueSubscription(Subscription):
    """Subscription backed by an unbounded asyncio.Queue"""

    def __init__(self, account_id: str):
        self.account_id = account_id
        self._queue: "asyncio.Queue[Optional[ChangeEvent]]" = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def deliver(self, event: ChangeEvent) -> None:
        if not self._closed:
            self._queue.put_nowait(event)

    async def get(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        if self._closed and self._queue.empty():
            return None
        try:
            if timeout is None:
                return await self._queue.get()
            return await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # wakes a consumer blocked in get()
        self._queue.put_nowait(None)


class InMemoryChangeFeed(ChangeFeed):
    """
    Change feed for a single API process

    Usage:
        feed = InMemoryChangeFeed()
        async with feed.subscribe(account_id) as subscription:
            event = await subscription.get(timeout=15)
    """

    def __init__(self):
        self._subscribers: Dict[str, Set[QueueSubscription]] = defaultdict(set)

    async def publish(self, event: ChangeEvent) -> None:
        for subscription in list(self._subscribers.get(event.account_id, ())):
            subscription.deliver(event)

    @asynccontextmanager
    async def subscribe(self, account_id: str) -> AsyncIterator[QueueSubscription]:
        subscription = QueueSubscription(account_id)
        self._subscribers[account_id].add(subscription)
        logger.debug(f"Subscribed to account {account_id}")
        try:
            yield subscription
        finally:
            subscription.close()
            self._remove(subscription)
            logger.debug(f"Unsubscribed from account {account_id}")

    def _remove(self, subscription: QueueSubscription) -> None:
        subscribers = self._subscribers.get(subscription.account_id)
        if subscribers is None:
            return
        subscribers.discard(subscription)
        if not subscribers:
            del self._subscribers[subscription.account_id]

    def subscriber_count(self, account_id: Optional[str] = None) -> int:
        if account_id is not None:
            return len(self._subscribers.get(account_id, ()))
        return sum(len(subscribers) for subscribers in self._subscribers.values())
