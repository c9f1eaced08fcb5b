from .base import BaseModel, generate_uuid
from .account import Account, AccountStatus, AccountRole
from .coin_transaction import CoinTransaction, TransactionType
from .notification import Notification, NotificationType
from .system_settings import SystemSettings, SYSTEM_SETTINGS_ID
from .change_event import ChangeEvent, ChangeEntity, ChangeAction

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Account",
    "AccountStatus",
    "AccountRole",
    "CoinTransaction",
    "TransactionType",
    "Notification",
    "NotificationType",
    "SystemSettings",
    "SYSTEM_SETTINGS_ID",
    "ChangeEvent",
    "ChangeEntity",
    "ChangeAction",
]
