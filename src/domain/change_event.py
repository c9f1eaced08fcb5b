"""Change Event

A committed change to one of an account's documents, delivered to live
subscribers of that account.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict
from pydantic import BaseModel, Field

from src.domain.account import Account
from src.domain.coin_transaction import CoinTransaction
from src.domain.notification import Notification


class ChangeEntity(str, Enum):
    ACCOUNT = "account"
    TRANSACTION = "transaction"
    NOTIFICATION = "notification"


class ChangeAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class ChangeEvent(BaseModel):
    account_id: str
    entity: ChangeEntity
    action: ChangeAction
    entity_id: str
    data: Dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=datetime.utcnow)

    @classmethod
    def account_updated(cls, account: Account) -> "ChangeEvent":
        return cls(
            account_id=account.id,
            entity=ChangeEntity.ACCOUNT,
            action=ChangeAction.UPDATED,
            entity_id=account.id,
            data=account.model_dump(mode="json"),
        )

    @classmethod
    def account_deleted(cls, account_id: str) -> "ChangeEvent":
        return cls(
            account_id=account_id,
            entity=ChangeEntity.ACCOUNT,
            action=ChangeAction.DELETED,
            entity_id=account_id,
        )

    @classmethod
    def transaction_created(cls, transaction: CoinTransaction) -> "ChangeEvent":
        return cls(
            account_id=transaction.account_id,
            entity=ChangeEntity.TRANSACTION,
            action=ChangeAction.CREATED,
            entity_id=transaction.id,
            data=transaction.model_dump(mode="json"),
        )

    @classmethod
    def notification_changed(cls, notification: Notification, action: ChangeAction) -> "ChangeEvent":
        data = {} if action == ChangeAction.DELETED else notification.model_dump(mode="json")
        return cls(
            account_id=notification.account_id,
            entity=ChangeEntity.NOTIFICATION,
            action=action,
            entity_id=notification.id,
            data=data,
        )

    @classmethod
    def notification_deleted(cls, account_id: str, notification_id: str) -> "ChangeEvent":
        return cls(
            account_id=account_id,
            entity=ChangeEntity.NOTIFICATION,
            action=ChangeAction.DELETED,
            entity_id=notification_id,
        )

    @classmethod
    def notification_read(cls, account_id: str, notification_id: str) -> "ChangeEvent":
        return cls(
            account_id=account_id,
            entity=ChangeEntity.NOTIFICATION,
            action=ChangeAction.UPDATED,
            entity_id=notification_id,
            data={"read": True},
        )
