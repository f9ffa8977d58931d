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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./care_ledger.db")
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", False))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Session tokens (HS256)
    SECRET_KEY = data.get("SECRET_KEY", "change-me-in-env-yaml")
    SESSION_TOKEN_TTL_SECONDS = data.get("SESSION_TOKEN_TTL_SECONDS", 3600)

    # Budget deduction engine
    LOCK_TIMEOUT_MS = data.get("LOCK_TIMEOUT_MS", 5000)
    LOCK_TIMEOUT_RETRY_AFTER_SECONDS = data.get("LOCK_TIMEOUT_RETRY_AFTER_SECONDS", 1)
    OVERSPEND_POLICY = data.get("OVERSPEND_POLICY", "flag")  # "flag" or "block"

    # Consistency reconciliation
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))

    RECONCILIATION_ON_STARTUP = bool(data.get("RECONCILIATION_ON_STARTUP", True))
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
    DEFAULT_BUDGET_ALLOCATIONS = data.get(
        "DEFAULT_BUDGET_ALLOCATIONS",
        {
            "SIL": "50000.00",
            "CommunityAccess": "25000.00",
            "CapacityBuilding": "15000.00",
        },
    )
