"""Data Transfer Objects for Account Use Cases"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from src.domain.account import Account, AccountRole, AccountStatus


class CreateAccountCommandDTO(BaseModel):
    """
    Command DTO for signup

    The authentication collaborator has already verified the email.
    """

    email: str = Field(..., min_length=3, max_length=255, description="Verified email")
    display_name: str = Field(default="", max_length=100)
    referral_code: Optional[str] = Field(
        default=None,
        description="Referral code of an existing account; unknown codes are ignored"
    )
    role: AccountRole = Field(default=AccountRole.USER)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "nimal@example.com",
                "display_name": "Nimal",
                "referral_code": "0B6D7F3E"
            }
        }


class AccountDTO(BaseModel):
    """Account as seen by its owner or an admin"""

    id: str
    email: str
    display_name: str
    api_key: str
    api_key_paused: bool
    balance: int
    status: AccountStatus
    role: AccountRole
    total_calls: int
    referral_code: str
    referred_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, account: Account) -> "AccountDTO":
        return cls(
            id=account.id,
            email=account.email,
            display_name=account.display_name,
            api_key=account.api_key,
            api_key_paused=account.api_key_paused,
            balance=account.balance,
            status=account.status,
            role=account.role,
            total_calls=account.total_calls,
            referral_code=account.referral_code,
            referred_by=account.referred_by,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class CreateAccountResponseDTO(BaseModel):
    account: AccountDTO
    signup_bonus: int = Field(..., description="Coins granted at signup")
    signup_transaction_id: Optional[str] = Field(default=None)
    welcome_notification_id: str
    referrer_id: Optional[str] = Field(default=None, description="Referrer, when the code matched")


class ApiKeyResponseDTO(BaseModel):
    account_id: str
    api_key: str
    api_key_paused: bool


class UpdateProfileCommandDTO(BaseModel):
    account_id: str = Field(..., description="Account editing its own profile")
    display_name: str = Field(..., max_length=100)
