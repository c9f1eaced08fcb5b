"""System Settings Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.system_settings import SystemSettings


class SystemSettingsRepository(ABC):

    @abstractmethod
    async def get(self) -> Optional[SystemSettings]:
        """Stored settings, or None if an admin never saved any"""
        pass

    @abstractmethod
    async def save(self, settings: SystemSettings) -> SystemSettings:
        """Insert or replace the settings row"""
        pass
