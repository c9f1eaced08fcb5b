"""SQLAlchemy implementation of SystemSettingsRepository"""

from typing import Optional
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.system_settings_repository import SystemSettingsRepository
from src.domain.system_settings import SystemSettings, SYSTEM_SETTINGS_ID


class SqlAlchemySystemSettingsRepository(SystemSettingsRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self) -> Optional[SystemSettings]:
        return await self.session.get(SystemSettings, SYSTEM_SETTINGS_ID)

    async def save(self, settings: SystemSettings) -> SystemSettings:
        settings.id = SYSTEM_SETTINGS_ID
        merged = await self.session.merge(settings)
        await self.session.flush()
        return merged
