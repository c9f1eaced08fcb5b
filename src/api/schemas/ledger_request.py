"""Request schemas for Ledger and Gateway API"""

from typing import Optional
from pydantic import BaseModel, Field


class TransferRequestSchema(BaseModel):
    """
    Request schema for a coin transfer

    Used for POST /ledger/transfer endpoint.
    """

    recipient_email: str = Field(..., min_length=3, description="Email of the receiving account")

    amount: int = Field(..., gt=0, description="Coins to transfer (must be > 0)")

    class Config:
        json_schema_extra = {
            "example": {
                "recipient_email": "kamal@example.com",
                "amount": 50
            }
        }


class ChargeRequestSchema(BaseModel):
    """
    Request schema for the API gateway charge

    Used for POST /gateway/charge endpoint.
    """

    api_key: str = Field(..., min_length=1, description="API key presented by the caller")

    endpoint: str = Field(..., min_length=1, max_length=255, description="Billed endpoint name")

    idempotency_key: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Gateway request ID for safe retries"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "api_key": "kx_live_3f9a0c1d2e4b5a6978c0d1e2",
                "endpoint": "youtube/search",
                "idempotency_key": "gw_req_7781"
            }
        }
