"""UpdateProfile Use Case

The caller edits their own display name. Email and referral code are fixed
at signup.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.domain.change_event import ChangeEvent
from src.app.use_cases.guards import load_active_account
from .dtos import AccountDTO, UpdateProfileCommandDTO

logger = logging.getLogger(__name__)


class UpdateProfile:
    def __init__(self, uow: UnitOfWork, account_repo: AccountRepository):
        self.uow = uow
        self.account_repo = account_repo

    async def execute(self, command: UpdateProfileCommandDTO) -> Result[AccountDTO]:
        try:
            # Step 1: Caller must be an active account
            loaded = await load_active_account(self.account_repo, command.account_id)
            if loaded.is_err():
                return loaded
            account = loaded.value

            display_name = command.display_name.strip()
            if not display_name:
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message="Display name cannot be empty",
                        reason="display_name",
                    )
                )

            # Step 2: Unchanged names are not written
            if account.display_name == display_name:
                return Return.ok(AccountDTO.from_entity(account))

            account.display_name = display_name
            await self.account_repo.save(account)
            self.uow.record(ChangeEvent.account_updated(account))
            await self.uow.commit()

            logger.info(f"Account {account.id} updated its display name")
            return Return.ok(AccountDTO.from_entity(account))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_PROFILE_FAILED",
                    message="Failed to update profile",
                    reason=str(e),
                )
            )
