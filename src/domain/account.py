"""Account Domain Entity

A registered user: identity, API credential, coin balance and status.
Balance is always >= 0 and changes only together with a CoinTransaction.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, CheckConstraint, String
from src.domain.base import BaseModel, generate_uuid


class AccountStatus(str, Enum):
    """Account status types"""
    ACTIVE = "active"
    SUSPENDED = "suspended"


class AccountRole(str, Enum):
    """Account roles"""
    USER = "user"
    ADMIN = "admin"


class Account(BaseModel, table=True):
    """
    Account - Identity, API key and coin balance of a user

    Domain Rules:
    - email, api_key and referral_code are unique
    - Balance must be non-negative
    - Balance updates only through ledger operations (one transaction per change)
    - total_calls only grows, and only through the API gateway charge
    - Suspended accounts cannot perform user-facing mutations
    """

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint('balance >= 0', name='account_balance_non_negative'),
        CheckConstraint('total_calls >= 0', name='account_total_calls_non_negative'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Opaque, stable account identifier"
    )

    email: str = Field(
        index=True,
        unique=True,
        description="Account email (unique, used as transfer address)"
    )

    display_name: str = Field(
        default="",
        sa_column=Column(String(100), nullable=False, default=""),
        description="Name shown in the portal"
    )

    api_key: str = Field(
        index=True,
        unique=True,
        description="Current API key (prefixed, unguessable)"
    )

    api_key_paused: bool = Field(
        default=False,
        description="Paused keys are refused by the API gateway"
    )

    balance: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Current coin balance (must be >= 0)"
    )

    status: AccountStatus = Field(
        default=AccountStatus.ACTIVE,
        description="Account status (active, suspended)"
    )

    role: AccountRole = Field(
        default=AccountRole.USER,
        description="Account role (user, admin)"
    )

    total_calls: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Number of billed API calls served"
    )

    referral_code: str = Field(
        index=True,
        unique=True,
        description="Code other users can sign up with"
    )

    referred_by: Optional[str] = Field(
        default=None,
        description="Account ID of the referrer, if any"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Account creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "0b6d7f3e-5c1a-4e7b-9a57-1f2d3c4b5a69",
                "email": "nimal@example.com",
                "display_name": "Nimal",
                "api_key": "kx_live_3f9a0c1d2e4b5a6978c0d1e2",
                "api_key_paused": False,
                "balance": 100,
                "status": "active",
                "role": "user",
                "total_calls": 0,
                "referral_code": "0B6D7F3E",
                "referred_by": None,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }
