"""SQLAlchemy implementation of NotificationRepository

The claim transition is a conditional UPDATE (claimed = False in the WHERE
clause); the affected row count tells the caller whether it won.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import delete, func, update
from sqlalchemy.orm import attributes
from sqlalchemy.orm.util import identity_key
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.notification_repository import NotificationRepository
from src.domain.notification import Notification, NotificationType


class SqlAlchemyNotificationRepository(NotificationRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    def _sync_cached(self, notification_id: str, **values) -> None:
        cached = self.session.identity_map.get(identity_key(Notification, notification_id))
        if cached is not None:
            for key, value in values.items():
                attributes.set_committed_value(cached, key, value)

    async def create(self, notification: Notification) -> Notification:
        self.session.add(notification)
        await self.session.flush()
        await self.session.refresh(notification)
        return notification

    async def create_many(self, notifications: List[Notification]) -> List[Notification]:
        self.session.add_all(notifications)
        await self.session.flush()
        return notifications

    async def get_by_id(self, notification_id: str) -> Optional[Notification]:
        stmt = select(Notification).where(Notification.id == notification_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_account_id(
        self,
        account_id: str,
        limit: int = 50,
        offset: int = 0,
        unread_only: bool = False,
        rewards_only: bool = False,
    ) -> Tuple[List[Notification], int]:
        conditions = [Notification.account_id == account_id]
        if unread_only:
            conditions.append(Notification.read.is_(False))
        if rewards_only:
            conditions.append(Notification.notification_type == NotificationType.COIN_REWARD)

        stmt = (
            select(Notification)
            .where(*conditions)
            .order_by(Notification.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        count_stmt = select(func.count()).select_from(Notification).where(*conditions)

        result = await self.session.execute(stmt)
        total = (await self.session.execute(count_stmt)).scalar_one()
        return list(result.scalars().all()), total

    async def count_unread(self, account_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(Notification)
            .where(Notification.account_id == account_id, Notification.read.is_(False))
        )
        return (await self.session.execute(stmt)).scalar_one()

    async def mark_read(self, notification_id: str) -> None:
        await self.session.execute(
            update(Notification)
            .where(Notification.id == notification_id)
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        self._sync_cached(notification_id, read=True)

    async def mark_all_read(self, account_id: str) -> List[str]:
        stmt = (
            update(Notification)
            .where(Notification.account_id == account_id, Notification.read.is_(False))
            .values(read=True)
            .returning(Notification.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        changed = list(result.scalars().all())
        for notification_id in changed:
            self._sync_cached(notification_id, read=True)
        return changed

    async def mark_claimed(self, notification_id: str) -> bool:
        claimed_at = datetime.utcnow()
        stmt = (
            update(Notification)
            .where(
                Notification.id == notification_id,
                Notification.notification_type == NotificationType.COIN_REWARD,
                Notification.claimed.is_(False),
            )
            .values(claimed=True, read=True, claimed_at=claimed_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return False

        self._sync_cached(notification_id, claimed=True, read=True, claimed_at=claimed_at)
        return True

    async def delete(self, notification_id: str) -> None:
        await self.session.execute(
            delete(Notification)
            .where(Notification.id == notification_id)
            .execution_options(synchronize_session=False)
        )
        cached = self.session.identity_map.get(identity_key(Notification, notification_id))
        if cached is not None:
            self.session.expunge(cached)

    async def delete_by_account_id(self, account_id: str) -> int:
        result = await self.session.execute(
            delete(Notification)
            .where(Notification.account_id == account_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def get_unclaimed_rewards(self, account_id: str) -> List[Notification]:
        stmt = select(Notification).where(
            Notification.account_id == account_id,
            Notification.notification_type == NotificationType.COIN_REWARD,
            Notification.claimed.is_(False),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_all(self, account_id: str) -> List[str]:
        stmt = (
            delete(Notification)
            .where(Notification.account_id == account_id)
            .returning(Notification.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        removed = list(result.scalars().all())
        for notification_id in removed:
            cached = self.session.identity_map.get(identity_key(Notification, notification_id))
            if cached is not None:
                self.session.expunge(cached)
        return removed
