"""Request schemas for Account API"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class SignupRequestSchema(BaseModel):
    """
    Request schema for signup

    Used for POST /accounts endpoint, after the authentication
    collaborator has verified the email.
    """

    email: str = Field(..., min_length=3, max_length=255, description="Verified email address")

    display_name: str = Field(default="", max_length=100, description="Name shown in the portal")

    referral_code: Optional[str] = Field(
        default=None,
        max_length=32,
        description="Referral code of the account that invited you"
    )

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        v = v.strip().lower()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("Invalid email address")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "email": "nimal@example.com",
                "display_name": "Nimal",
                "referral_code": "0B6D7F3E"
            }
        }


class ApiKeyPausedRequestSchema(BaseModel):
    paused: bool = Field(..., description="True pauses the API key, False resumes it")


class UpdateProfileRequestSchema(BaseModel):
    """Request schema for PUT /accounts/me"""

    display_name: str = Field(..., min_length=1, max_length=100, description="Name shown in the portal")

    @field_validator('display_name')
    @classmethod
    def validate_display_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Display name cannot be empty")
        return v
