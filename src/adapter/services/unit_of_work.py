from typing import List, Optional
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.change_feed import ChangeFeed
from src.app.services.unit_of_work import UnitOfWork
from src.domain.change_event import ChangeEvent


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession, change_feed: Optional[ChangeFeed] = None):
        self.session = session
        self.change_feed = change_feed
        self._pending: List[ChangeEvent] = []

    def record(self, event: ChangeEvent) -> None:
        self._pending.append(event)

    async def commit(self):
        await self.session.commit()
        events, self._pending = self._pending, []
        if self.change_feed is None:
            return
        for event in events:
            await self.change_feed.publish(event)

    async def rollback(self):
        self._pending = []
        await self.session.rollback()
