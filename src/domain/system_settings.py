"""System Settings Domain Entity

Coin economy settings managed by admins. Stored as a single row.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field
from src.domain.base import BaseModel

SYSTEM_SETTINGS_ID = "system"


class SystemSettings(BaseModel, table=True):
    """
    System Settings - Coin economy configuration

    Domain Rules:
    - Exactly one row (id = "system")
    - cost_per_call >= 1, bonuses and daily_claim_coins >= 0
    - min_transfer_amount <= max_transfer_amount
    - Consumed by signup, transfer and the API gateway charge
    """

    __tablename__ = "system_settings"

    id: str = Field(
        default=SYSTEM_SETTINGS_ID,
        primary_key=True,
        description="Settings row identifier"
    )

    cost_per_call: int = Field(description="Coins charged per billed API call")
    referral_bonus: int = Field(description="Coins for the referrer and the referred account")
    welcome_bonus: int = Field(description="Coins granted at signup")
    min_transfer_amount: int = Field(description="Smallest allowed transfer")
    max_transfer_amount: int = Field(description="Largest allowed transfer")
    daily_claim_coins: int = Field(default=100, description="Coins offered by the daily claim")

    updated_by: Optional[str] = Field(
        default=None,
        description="Admin account ID of the last update"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    @classmethod
    def from_config(cls, config) -> "SystemSettings":
        """Defaults used until an admin stores settings"""
        return cls(
            id=SYSTEM_SETTINGS_ID,
            cost_per_call=config.COST_PER_API_CALL,
            referral_bonus=config.REFERRAL_BONUS,
            welcome_bonus=config.SIGNUP_BONUS,
            min_transfer_amount=config.MIN_TRANSFER_AMOUNT,
            max_transfer_amount=config.MAX_TRANSFER_AMOUNT,
            daily_claim_coins=config.DAILY_CLAIM_COINS,
        )
