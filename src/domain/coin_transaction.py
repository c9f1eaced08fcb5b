"""Coin Transaction Domain Entity

Immutable append-only audit trail of all balance changes.
Each transaction records the signed delta with balance snapshots.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, BigInteger, String
from src.domain.base import BaseModel, generate_uuid


class TransactionType(str, Enum):
    """Coin transaction types"""
    PURCHASE = "purchase"                    # Coin package bought (recorded by admin)
    USAGE = "usage"                          # Billed third-party API call
    TRANSFER_SENT = "transfer_sent"          # Outgoing user-to-user transfer
    TRANSFER_RECEIVED = "transfer_received"  # Incoming user-to-user transfer
    SIGNUP_BONUS = "signup_bonus"            # Welcome (+ referral) bonus at signup
    REFERRAL = "referral"                    # Claimed referral reward
    ADMIN_CREDIT = "admin_credit"            # Claimed admin coin reward
    ADMIN_DEDUCT = "admin_deduct"            # Immediate admin deduction

    def is_credit(self) -> bool:
        return self in CREDIT_TYPES

    def is_debit(self) -> bool:
        return self in DEBIT_TYPES


CREDIT_TYPES = frozenset({
    TransactionType.PURCHASE,
    TransactionType.TRANSFER_RECEIVED,
    TransactionType.SIGNUP_BONUS,
    TransactionType.REFERRAL,
    TransactionType.ADMIN_CREDIT,
})

DEBIT_TYPES = frozenset({
    TransactionType.USAGE,
    TransactionType.TRANSFER_SENT,
    TransactionType.ADMIN_DEDUCT,
})


class CoinTransaction(BaseModel, table=True):
    """
    Coin Transaction - Immutable audit trail of balance mutations

    Domain Rules:
    - Transactions are immutable (append-only)
    - amount is signed: positive for credit types, negative for debit types
    - balance_after == balance_before + amount
    - idempotency_key, when given, must be unique (prevents double-billing)
    - Deleted together with the owning account

    Reference types:
    - "notification": credit produced by claiming a coin reward
    - "transfer": one side of a user-to-user transfer
    - "api_call": gateway usage charge
    - "purchase" / "admin_adjustment": direct admin actions
    """

    __tablename__ = "coin_transactions"
    __table_args__ = (
        Index('ix_coin_transactions_account_created', 'account_id', 'created_at'),
        Index('ix_coin_transactions_reference', 'reference_type', 'reference_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique transaction identifier"
    )

    account_id: str = Field(
        sa_column=Column(String, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False),
        description="Owning account"
    )

    transaction_type: TransactionType = Field(
        description="Type of transaction"
    )

    amount: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Signed coin delta applied to the balance"
    )

    balance_before: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Balance before transaction"
    )

    balance_after: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Balance after transaction"
    )

    description: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False, default=""),
        description="Human readable description"
    )

    counterparty: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Email of the other side (transfers, referrals)"
    )

    reference_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Type of reference (e.g., 'notification', 'transfer', 'api_call')"
    )

    reference_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="ID of referenced entity (e.g., notification_id, endpoint name)"
    )

    idempotency_key: Optional[str] = Field(
        default=None,
        unique=True,
        index=True,
        description="Optional key for idempotent gateway operations"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Transaction timestamp (immutable)"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "7c1e2a90-3b4d-4f6e-8a9b-0c1d2e3f4a5b",
                "account_id": "0b6d7f3e-5c1a-4e7b-9a57-1f2d3c4b5a69",
                "transaction_type": "transfer_sent",
                "amount": -50,
                "balance_before": 100,
                "balance_after": 50,
                "description": "Transferred 50 coins to kamal@example.com",
                "counterparty": "kamal@example.com",
                "reference_type": "transfer",
                "reference_id": None,
                "idempotency_key": None,
                "created_at": "2024-01-01T00:00:00Z"
            }
        }
