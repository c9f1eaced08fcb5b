"""Get Account Use Case"""

from libs.result import Result, Return
from src.app.repositories.account_repository import AccountRepository
from src.app.use_cases.guards import account_not_found
from .dtos import AccountDTO


class GetAccount:
    def __init__(self, account_repo: AccountRepository):
        self.account_repo = account_repo

    async def execute(self, account_id: str) -> Result[AccountDTO]:
        account = await self.account_repo.get_by_id(account_id)
        if not account:
            return Return.err(account_not_found(account_id))
        return Return.ok(AccountDTO.from_entity(account))
