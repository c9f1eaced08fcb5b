"""SQLAlchemy implementation of AccountRepository

Balance mutations are conditional UPDATE statements, so the non-negative
balance rule holds even when concurrent sessions act on stale reads.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import delete, func, update, case
from sqlalchemy.orm import attributes
from sqlalchemy.orm.util import identity_key
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.account_repository import AccountRepository, AccountStats
from src.domain.account import Account, AccountStatus


class SqlAlchemyAccountRepository(AccountRepository):
    """
    SQLAlchemy implementation of AccountRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE (ignored by SQLite)
    - Guarded balance updates (balance + delta >= 0) with RETURNING
    - Identity map kept in sync after guarded updates
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, account_id: str, for_update: bool = False) -> Optional[Account]:
        stmt = select(Account).where(Account.id == account_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[Account]:
        stmt = select(Account).where(func.lower(Account.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_api_key(self, api_key: str) -> Optional[Account]:
        stmt = select(Account).where(Account.api_key == api_key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_referral_code(self, referral_code: str) -> Optional[Account]:
        stmt = select(Account).where(Account.referral_code == referral_code.strip().upper())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, account: Account) -> Account:
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def save(self, account: Account) -> Account:
        account.updated_at = datetime.utcnow()
        self.session.add(account)
        await self.session.flush()
        return account

    async def apply_balance_delta(
        self, account_id: str, delta: int, count_call: bool = False
    ) -> Optional[int]:
        """
        Add delta to the balance in one guarded statement

        Note:
            The WHERE clause re-checks the balance at write time, so two
            concurrent debits cannot both pass against the same funds.
        """
        now = datetime.utcnow()
        values = {
            "balance": Account.balance + delta,
            "updated_at": now,
        }
        if count_call:
            values["total_calls"] = Account.total_calls + 1

        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .where(Account.balance + delta >= 0)
            .values(**values)
            .returning(Account.balance, Account.total_calls)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None

        new_balance, total_calls = row
        cached = self.session.identity_map.get(identity_key(Account, account_id))
        if cached is not None:
            attributes.set_committed_value(cached, "balance", new_balance)
            attributes.set_committed_value(cached, "total_calls", total_calls)
            attributes.set_committed_value(cached, "updated_at", now)
        return new_balance

    async def list_ids(self) -> List[str]:
        result = await self.session.execute(select(Account.id).order_by(Account.created_at))
        return list(result.scalars().all())

    async def list_accounts(
        self, limit: int = 50, offset: int = 0, email_query: Optional[str] = None
    ) -> Tuple[List[Account], int]:
        stmt = select(Account)
        count_stmt = select(func.count()).select_from(Account)

        if email_query:
            pattern = f"%{email_query.strip().lower()}%"
            stmt = stmt.where(func.lower(Account.email).like(pattern))
            count_stmt = count_stmt.where(func.lower(Account.email).like(pattern))

        stmt = stmt.order_by(Account.created_at.desc()).limit(limit).offset(offset)

        result = await self.session.execute(stmt)
        total = (await self.session.execute(count_stmt)).scalar_one()
        return list(result.scalars().all()), total

    async def get_all(self) -> List[Account]:
        result = await self.session.execute(select(Account))
        return list(result.scalars().all())

    async def get_stats(self) -> AccountStats:
        stmt = select(
            func.count(Account.id),
            func.sum(case((Account.status == AccountStatus.ACTIVE, 1), else_=0)),
            func.sum(case((Account.status == AccountStatus.SUSPENDED, 1), else_=0)),
            func.sum(Account.balance),
        )
        total, active, suspended, coins = (await self.session.execute(stmt)).one()
        return AccountStats(
            total_users=total or 0,
            active_users=active or 0,
            suspended_users=suspended or 0,
            total_coins=coins or 0,
        )

    async def delete(self, account_id: str) -> None:
        await self.session.execute(
            delete(Account)
            .where(Account.id == account_id)
            .execution_options(synchronize_session=False)
        )
        cached = self.session.identity_map.get(identity_key(Account, account_id))
        if cached is not None:
            self.session.expunge(cached)
