"""Account use cases"""
from .create_account import CreateAccount
from .get_account import GetAccount
from .set_account_status import SetAccountStatus
from .api_key import RegenerateApiKey, SetApiKeyPaused
from .delete_account import DeleteAccount
from .update_profile import UpdateProfile
from .dtos import (
    CreateAccountCommandDTO,
    AccountDTO,
    CreateAccountResponseDTO,
    ApiKeyResponseDTO,
    UpdateProfileCommandDTO,
)

__all__ = [
    "CreateAccount",
    "GetAccount",
    "SetAccountStatus",
    "RegenerateApiKey",
    "SetApiKeyPaused",
    "DeleteAccount",
    "UpdateProfile",
    "CreateAccountCommandDTO",
    "AccountDTO",
    "CreateAccountResponseDTO",
    "ApiKeyResponseDTO",
    "UpdateProfileCommandDTO",
]
