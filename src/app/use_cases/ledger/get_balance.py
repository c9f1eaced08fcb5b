"""Get Balance Use Case

Retrieves an account's current coin balance and call counter.
"""

from libs.result import Result, Return
from src.app.repositories.account_repository import AccountRepository
from src.app.use_cases.guards import account_not_found
from src.app.use_cases.ledger.dtos import BalanceResponseDTO


class GetBalance:
    """
    Get Balance Use Case

    Read-only. Suspended accounts can still see their balance.
    """

    def __init__(self, account_repo: AccountRepository):
        self.account_repo = account_repo

    async def execute(self, account_id: str) -> Result[BalanceResponseDTO]:
        """
        Errors:
            ACCOUNT_NOT_FOUND: No account with this ID
        """
        account = await self.account_repo.get_by_id(account_id)

        if not account:
            return Return.err(account_not_found(account_id))

        return Return.ok(
            BalanceResponseDTO(
                account_id=account.id,
                balance=account.balance,
                total_calls=account.total_calls,
                last_updated=account.updated_at,
            )
        )
