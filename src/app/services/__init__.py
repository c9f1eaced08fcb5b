from .unit_of_work import UnitOfWork
from .change_feed import ChangeFeed, Subscription
from .credentials import generate_api_key, generate_referral_code

__all__ = [
    "UnitOfWork",
    "ChangeFeed",
    "Subscription",
    "generate_api_key",
    "generate_referral_code",
]
