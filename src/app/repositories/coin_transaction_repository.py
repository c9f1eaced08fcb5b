"""Coin Transaction Repository Interface

Defines the contract for the append-only transaction log.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple
from src.domain.coin_transaction import CoinTransaction


class CoinTransactionRepository(ABC):
    """
    Repository interface for CoinTransaction persistence

    Transactions are never updated. They are only removed together with the
    owning account.
    """

    @abstractmethod
    async def create(self, transaction: CoinTransaction) -> CoinTransaction:
        """
        Append a transaction

        Raises:
            IntegrityError: If idempotency_key already exists
        """
        pass

    @abstractmethod
    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[CoinTransaction]:
        """Retrieve transaction by idempotency key"""
        pass

    @abstractmethod
    async def get_by_account_id(
        self, account_id: str, limit: int = 50, offset: int = 0
    ) -> Tuple[List[CoinTransaction], int]:
        """
        Page through an account's transactions, newest first

        Returns:
            (transactions, total count for the account)
        """
        pass

    @abstractmethod
    async def get_transaction_sums(self) -> Dict[str, int]:
        """Sum of transaction amounts per account; accounts without transactions are absent"""
        pass

    @abstractmethod
    async def delete_by_account_id(self, account_id: str) -> int:
        """Remove all transactions of an account, returns the number removed"""
        pass
