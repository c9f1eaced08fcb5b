"""GetSystemSettings / UpdateSystemSettings Use Cases

Settings fall back to the configured defaults until an admin saves them.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.system_settings_repository import SystemSettingsRepository
from src.domain.system_settings import SystemSettings
from src.app.use_cases.guards import load_admin
from .dtos import SystemSettingsDTO, UpdateSettingsCommandDTO

logger = logging.getLogger(__name__)


class GetSystemSettings:
    def __init__(self, settings_repo: SystemSettingsRepository, defaults: SystemSettings):
        self.settings_repo = settings_repo
        self.defaults = defaults

    async def execute(self) -> Result[SystemSettings]:
        stored = await self.settings_repo.get()
        return Return.ok(stored or self.defaults)


class UpdateSystemSettings:
    """
    Use Case: Update coin economy settings

    Business Rules:
    1. Admin only
    2. cost_per_call >= 1, bonuses >= 0
    3. min_transfer_amount <= max_transfer_amount after merging with the
       current values
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        settings_repo: SystemSettingsRepository,
        defaults: SystemSettings,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.settings_repo = settings_repo
        self.defaults = defaults

    async def execute(self, command: UpdateSettingsCommandDTO) -> Result[SystemSettingsDTO]:
        try:
            admin = await load_admin(self.account_repo, command.admin_id)
            if admin.is_err():
                return admin

            current = await self.settings_repo.get() or self.defaults
            changes = command.model_dump(exclude={"admin_id"}, exclude_none=True)
            values = {
                "cost_per_call": current.cost_per_call,
                "referral_bonus": current.referral_bonus,
                "welcome_bonus": current.welcome_bonus,
                "min_transfer_amount": current.min_transfer_amount,
                "max_transfer_amount": current.max_transfer_amount,
                "daily_claim_coins": current.daily_claim_coins,
            }
            values.update(changes)

            if values["min_transfer_amount"] > values["max_transfer_amount"]:
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message="min_transfer_amount must not exceed max_transfer_amount",
                        reason=f"min={values['min_transfer_amount']}, max={values['max_transfer_amount']}",
                    )
                )

            saved = await self.settings_repo.save(
                SystemSettings(
                    **values,
                    updated_by=command.admin_id,
                    updated_at=datetime.utcnow(),
                )
            )
            await self.uow.commit()

            logger.info(f"Admin {command.admin_id} updated system settings: {changes}")
            return Return.ok(SystemSettingsDTO.from_entity(saved))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_SETTINGS_FAILED",
                    message="Failed to update system settings",
                    reason=str(e),
                )
            )
