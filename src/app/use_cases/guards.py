"""Actor checks shared by use cases

The authentication collaborator hands us an account ID. These helpers
decide whether that account may act: user-facing mutations require an
active account, admin operations additionally require the admin role.
"""

from libs.result import Result, Return, Error
from src.app.repositories.account_repository import AccountRepository
from src.domain.account import Account


async def load_active_account(account_repo: AccountRepository, account_id: str) -> Result[Account]:
    account = await account_repo.get_by_id(account_id)
    if not account:
        return Return.err(
            Error(
                code="UNAUTHORIZED",
                message="Unknown account",
                reason=f"account_id={account_id}",
            )
        )
    if not account.is_active():
        return Return.err(
            Error(
                code="ACCOUNT_SUSPENDED",
                message="Your account is suspended",
                reason=f"account_id={account_id}, status={account.status.value}",
            )
        )
    return Return.ok(account)


async def load_admin(account_repo: AccountRepository, admin_id: str) -> Result[Account]:
    result = await load_active_account(account_repo, admin_id)
    if result.is_err():
        return result
    if not result.value.is_admin():
        return Return.err(
            Error(
                code="FORBIDDEN",
                message="Admin only",
                reason=f"account_id={admin_id}",
            )
        )
    return result


def account_not_found(account_id: str) -> Error:
    return Error(
        code="ACCOUNT_NOT_FOUND",
        message=f"Account {account_id} not found",
    )
