"""RegenerateApiKey / SetApiKeyPaused Use Cases

Keys are looked up by value, so the old key stops resolving as soon as
the new one is committed.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.credentials import generate_api_key
from src.app.repositories.account_repository import AccountRepository
from src.domain.change_event import ChangeEvent
from src.app.use_cases.guards import load_active_account, account_not_found
from .dtos import ApiKeyResponseDTO

logger = logging.getLogger(__name__)


class RegenerateApiKey:
    def __init__(self, uow: UnitOfWork, account_repo: AccountRepository, api_key_prefix: str):
        self.uow = uow
        self.account_repo = account_repo
        self.api_key_prefix = api_key_prefix

    async def execute(self, account_id: str) -> Result[ApiKeyResponseDTO]:
        try:
            loaded = await load_active_account(self.account_repo, account_id)
            if loaded.is_err():
                return loaded
            account = loaded.value

            account.api_key = generate_api_key(self.api_key_prefix)
            await self.account_repo.save(account)

            self.uow.record(ChangeEvent.account_updated(account))
            await self.uow.commit()

            logger.info(f"Regenerated API key for account {account.id}")
            return Return.ok(
                ApiKeyResponseDTO(
                    account_id=account.id,
                    api_key=account.api_key,
                    api_key_paused=account.api_key_paused,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="REGENERATE_API_KEY_FAILED",
                    message="Failed to regenerate API key",
                    reason=str(e),
                )
            )


class SetApiKeyPaused:
    """Owner or admin pauses/resumes the API key; paused keys are refused by the gateway"""

    def __init__(self, uow: UnitOfWork, account_repo: AccountRepository):
        self.uow = uow
        self.account_repo = account_repo

    async def execute(self, actor_id: str, account_id: str, paused: bool) -> Result[ApiKeyResponseDTO]:
        try:
            loaded = await load_active_account(self.account_repo, actor_id)
            if loaded.is_err():
                return loaded
            actor = loaded.value

            if actor.id != account_id and not actor.is_admin():
                return Return.err(
                    Error(
                        code="FORBIDDEN",
                        message="Cannot change another account's API key",
                        reason=f"actor_id={actor_id}, account_id={account_id}",
                    )
                )

            account = actor if actor.id == account_id else await self.account_repo.get_by_id(account_id)
            if not account:
                return Return.err(account_not_found(account_id))

            if account.api_key_paused != paused:
                account.api_key_paused = paused
                await self.account_repo.save(account)
                self.uow.record(ChangeEvent.account_updated(account))
                await self.uow.commit()
                logger.info(f"API key of account {account.id} {'paused' if paused else 'resumed'}")

            return Return.ok(
                ApiKeyResponseDTO(
                    account_id=account.id,
                    api_key=account.api_key,
                    api_key_paused=account.api_key_paused,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SET_API_KEY_PAUSED_FAILED",
                    message="Failed to change API key state",
                    reason=str(e),
                )
            )
