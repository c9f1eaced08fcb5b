"""Account Repository Interface

Defines the contract for account persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from pydantic import BaseModel
from src.domain.account import Account


class AccountStats(BaseModel):
    """Aggregate over all accounts for the admin user table"""

    total_users: int = 0
    active_users: int = 0
    suspended_users: int = 0
    total_coins: int = 0


class AccountRepository(ABC):
    """
    Repository interface for Account persistence

    Balance changes go exclusively through apply_balance_delta, which is a
    conditional update: it never lets the stored balance drop below zero,
    regardless of what the caller read earlier.
    """

    @abstractmethod
    async def get_by_id(self, account_id: str, for_update: bool = False) -> Optional[Account]:
        """
        Retrieve account by ID

        Args:
            account_id: Account identifier
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Account if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Account]:
        """Retrieve account by email (case-insensitive)"""
        pass

    @abstractmethod
    async def get_by_api_key(self, api_key: str) -> Optional[Account]:
        """Retrieve account owning the given API key"""
        pass

    @abstractmethod
    async def get_by_referral_code(self, referral_code: str) -> Optional[Account]:
        """Retrieve account owning the given referral code"""
        pass

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """
        Create a new account

        Args:
            account: Account entity to persist

        Returns:
            Created Account
        """
        pass

    @abstractmethod
    async def save(self, account: Account) -> Account:
        """Persist non-balance field changes (status, API key, pause flag)"""
        pass

    @abstractmethod
    async def apply_balance_delta(
        self, account_id: str, delta: int, count_call: bool = False
    ) -> Optional[int]:
        """
        Atomically add delta to the balance if the result stays >= 0

        Args:
            account_id: Account ID
            delta: Signed coin amount
            count_call: If True, also increment total_calls by one

        Returns:
            New balance, or None if the account does not exist or the
            balance would become negative (nothing is written in that case)
        """
        pass

    @abstractmethod
    async def list_ids(self) -> List[str]:
        """Snapshot of all current account IDs"""
        pass

    @abstractmethod
    async def list_accounts(
        self, limit: int = 50, offset: int = 0, email_query: Optional[str] = None
    ) -> Tuple[List[Account], int]:
        """
        Page through accounts, newest first

        Returns:
            (accounts, total matching count)
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[Account]:
        """Retrieve all accounts (reconciliation)"""
        pass

    @abstractmethod
    async def get_stats(self) -> AccountStats:
        """Counts of total/active/suspended accounts and the sum of balances"""
        pass

    @abstractmethod
    async def delete(self, account_id: str) -> None:
        """Delete the account row"""
        pass
