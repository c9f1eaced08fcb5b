from .account_repository import SqlAlchemyAccountRepository
from .coin_transaction_repository import SqlAlchemyCoinTransactionRepository
from .notification_repository import SqlAlchemyNotificationRepository
from .system_settings_repository import SqlAlchemySystemSettingsRepository

__all__ = [
    "SqlAlchemyAccountRepository",
    "SqlAlchemyCoinTransactionRepository",
    "SqlAlchemyNotificationRepository",
    "SqlAlchemySystemSettingsRepository",
]
