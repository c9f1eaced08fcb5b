"""Request schemas for Admin API"""

from typing import Optional
from pydantic import BaseModel, Field

from src.domain.account import AccountStatus
from src.app.use_cases.ledger.dtos import AdjustDirection


class SetStatusRequestSchema(BaseModel):
    status: AccountStatus = Field(..., description="active or suspended")


class AdjustRequestSchema(BaseModel):
    """
    Request schema for an admin balance adjustment

    Used for POST /admin/accounts/{account_id}/adjust endpoint.
    """

    amount: int = Field(..., gt=0, description="Coins (must be > 0)")

    direction: AdjustDirection = Field(
        ...,
        description="deduct is applied now; credit is delivered as a claimable reward"
    )

    reason: Optional[str] = Field(default=None, max_length=255, description="Shown to the user")

    class Config:
        json_schema_extra = {
            "example": {
                "amount": 50,
                "direction": "deduct",
                "reason": "Refund reversal"
            }
        }


class PurchaseRequestSchema(BaseModel):
    amount: int = Field(..., gt=0, description="Coins in the purchased package")
    description: str = Field(default="Coin package purchase", max_length=255)
    reference_id: Optional[str] = Field(default=None, description="External order ID")


class UpdateSettingsRequestSchema(BaseModel):
    """Omitted fields keep their current value"""

    cost_per_call: Optional[int] = Field(default=None, ge=1)
    referral_bonus: Optional[int] = Field(default=None, ge=0)
    welcome_bonus: Optional[int] = Field(default=None, ge=0)
    min_transfer_amount: Optional[int] = Field(default=None, ge=1)
    max_transfer_amount: Optional[int] = Field(default=None, ge=1)
    daily_claim_coins: Optional[int] = Field(default=None, ge=0)
