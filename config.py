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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./purchases.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", False))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Purchase transaction
    LOCK_TIMEOUT_MS = data.get("LOCK_TIMEOUT_MS", 5000)  # Max wait for a product row lock
    INVOICE_PREFIX = data.get("INVOICE_PREFIX", "INV")
    INVOICE_MAX_ATTEMPTS = data.get("INVOICE_MAX_ATTEMPTS", 5)
    INVOICE_RETRY_DELAY_MS = data.get("INVOICE_RETRY_DELAY_MS", 10)

    # Invoice document
    COMPANY_NAME = data.get("COMPANY_NAME", "Inventory Store")
    COMPANY_ADDRESS = data.get("COMPANY_ADDRESS", "")
    CURRENCY = data.get("CURRENCY", "USD")
