"""API key and referral code generation"""

import secrets

API_KEY_RANDOM_BYTES = 24
REFERRAL_CODE_LENGTH = 8


def generate_api_key(prefix: str) -> str:
    """Unguessable API key, prefixed so it is recognizable in logs and configs"""
    return f"{prefix}{secrets.token_hex(API_KEY_RANDOM_BYTES)}"


def generate_referral_code() -> str:
    return secrets.token_hex(REFERRAL_CODE_LENGTH // 2).upper()
