"""ListAccounts / GetAccountStats Use Cases

Read-only aggregation for the admin user table.
"""

from typing import Optional
from libs.result import Result, Return
from src.app.repositories.account_repository import AccountRepository
from src.app.use_cases.guards import load_admin
from src.app.use_cases.accounts.dtos import AccountDTO
from .dtos import AccountStatsDTO, ListAccountsResponseDTO


class ListAccounts:
    def __init__(self, account_repo: AccountRepository):
        self.account_repo = account_repo

    async def execute(
        self,
        admin_id: str,
        limit: int = 50,
        offset: int = 0,
        email_query: Optional[str] = None,
    ) -> Result[ListAccountsResponseDTO]:
        admin = await load_admin(self.account_repo, admin_id)
        if admin.is_err():
            return admin

        accounts, total = await self.account_repo.list_accounts(
            limit=limit, offset=offset, email_query=email_query
        )
        return Return.ok(
            ListAccountsResponseDTO(
                accounts=[AccountDTO.from_entity(a) for a in accounts],
                total=total,
                limit=limit,
                offset=offset,
            )
        )


class GetAccountStats:
    def __init__(self, account_repo: AccountRepository):
        self.account_repo = account_repo

    async def execute(self, admin_id: str) -> Result[AccountStatsDTO]:
        admin = await load_admin(self.account_repo, admin_id)
        if admin.is_err():
            return admin

        stats = await self.account_repo.get_stats()
        return Return.ok(AccountStatsDTO(**stats.model_dump()))
