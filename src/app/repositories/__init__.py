from .account_repository import AccountRepository, AccountStats
from .coin_transaction_repository import CoinTransactionRepository
from .notification_repository import NotificationRepository
from .system_settings_repository import SystemSettingsRepository

__all__ = [
    "AccountRepository",
    "AccountStats",
    "CoinTransactionRepository",
    "NotificationRepository",
    "SystemSettingsRepository",
]
