import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./coins.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", False))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))

    # API keys handed out to accounts
    API_KEY_PREFIX = data.get("API_KEY_PREFIX", "kx_live_")

    # Coin defaults, used until an admin stores system settings
    SIGNUP_BONUS = data.get("SIGNUP_BONUS", 100)
    REFERRAL_BONUS = data.get("REFERRAL_BONUS", 60)
    COST_PER_API_CALL = data.get("COST_PER_API_CALL", 5)
    MIN_TRANSFER_AMOUNT = data.get("MIN_TRANSFER_AMOUNT", 10)
    MAX_TRANSFER_AMOUNT = data.get("MAX_TRANSFER_AMOUNT", 10000)
    DAILY_CLAIM_COINS = data.get("DAILY_CLAIM_COINS", 100)

    TRANSACTIONS_PAGE_SIZE = data.get("TRANSACTIONS_PAGE_SIZE", 50)
    NOTIFICATIONS_PAGE_SIZE = data.get("NOTIFICATIONS_PAGE_SIZE", 50)

    # Ledger Reconciliation Configuration
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
