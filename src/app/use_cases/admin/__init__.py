"""Admin control surface use cases"""
from .list_accounts import ListAccounts, GetAccountStats
from .system_settings import GetSystemSettings, UpdateSystemSettings
from .dtos import (
    ListAccountsResponseDTO,
    AccountStatsDTO,
    SystemSettingsDTO,
    UpdateSettingsCommandDTO,
)

__all__ = [
    "ListAccounts",
    "GetAccountStats",
    "GetSystemSettings",
    "UpdateSystemSettings",
    "ListAccountsResponseDTO",
    "AccountStatsDTO",
    "SystemSettingsDTO",
    "UpdateSettingsCommandDTO",
]
