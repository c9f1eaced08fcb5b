"""Data Transfer Objects for Admin Use Cases"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.system_settings import SystemSettings
from src.app.use_cases.accounts.dtos import AccountDTO


class ListAccountsResponseDTO(BaseModel):
    """Admin user table page"""

    accounts: List[AccountDTO]
    total: int
    limit: int
    offset: int


class AccountStatsDTO(BaseModel):
    total_users: int
    active_users: int
    suspended_users: int
    total_coins: int


class SystemSettingsDTO(BaseModel):
    cost_per_call: int
    referral_bonus: int
    welcome_bonus: int
    min_transfer_amount: int
    max_transfer_amount: int
    daily_claim_coins: int
    updated_by: Optional[str] = None
    updated_at: datetime

    @classmethod
    def from_entity(cls, settings: SystemSettings) -> "SystemSettingsDTO":
        return cls(
            cost_per_call=settings.cost_per_call,
            referral_bonus=settings.referral_bonus,
            welcome_bonus=settings.welcome_bonus,
            min_transfer_amount=settings.min_transfer_amount,
            max_transfer_amount=settings.max_transfer_amount,
            daily_claim_coins=settings.daily_claim_coins,
            updated_by=settings.updated_by,
            updated_at=settings.updated_at,
        )


class UpdateSettingsCommandDTO(BaseModel):
    """
    Command DTO for a settings update

    Omitted fields keep their current value.
    """

    admin_id: str = Field(..., description="Admin performing the update")
    cost_per_call: Optional[int] = Field(default=None, ge=1)
    referral_bonus: Optional[int] = Field(default=None, ge=0)
    welcome_bonus: Optional[int] = Field(default=None, ge=0)
    min_transfer_amount: Optional[int] = Field(default=None, ge=1)
    max_transfer_amount: Optional[int] = Field(default=None, ge=1)
    daily_claim_coins: Optional[int] = Field(default=None, ge=0)