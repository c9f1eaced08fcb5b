"""SQLAlchemy implementation of CoinTransactionRepository

Provides persistence for CoinTransaction entities with idempotency enforcement
via unique constraint on idempotency_key.
"""

from typing import Dict, List, Optional, Tuple
from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.coin_transaction_repository import CoinTransactionRepository
from src.domain.coin_transaction import CoinTransaction


class SqlAlchemyCoinTransactionRepository(CoinTransactionRepository):
    """
    SQLAlchemy implementation of CoinTransactionRepository

    Features:
    - Idempotency enforcement via unique idempotency_key constraint
    - Immutable append-only transactions
    - Newest-first paging per account
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: CoinTransaction) -> CoinTransaction:
        """
        Create a new coin transaction

        Raises:
            IntegrityError: If idempotency_key already exists (duplicate transaction attempt)
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[CoinTransaction]:
        stmt = select(CoinTransaction).where(
            CoinTransaction.idempotency_key == idempotency_key
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_account_id(
        self, account_id: str, limit: int = 50, offset: int = 0
    ) -> Tuple[List[CoinTransaction], int]:
        stmt = (
            select(CoinTransaction)
            .where(CoinTransaction.account_id == account_id)
            .order_by(CoinTransaction.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        count_stmt = (
            select(func.count())
            .select_from(CoinTransaction)
            .where(CoinTransaction.account_id == account_id)
        )

        result = await self.session.execute(stmt)
        total = (await self.session.execute(count_stmt)).scalar_one()
        return list(result.scalars().all()), total

    async def get_transaction_sums(self) -> Dict[str, int]:
        stmt = select(CoinTransaction.account_id, func.sum(CoinTransaction.amount)).group_by(
            CoinTransaction.account_id
        )
        result = await self.session.execute(stmt)
        return {account_id: int(total) for account_id, total in result.all()}

    async def delete_by_account_id(self, account_id: str) -> int:
        result = await self.session.execute(
            delete(CoinTransaction)
            .where(CoinTransaction.account_id == account_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
