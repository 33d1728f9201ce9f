"""
Configuration Management - Crawler Data Access
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_bool_env(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable"""
    val = os.getenv(key, str(default)).lower()
    return val in ('true', '1', 't', 'y', 'yes')


def get_int_env(key: str, default: int = 0) -> int:
    """Get integer from environment variable"""
    try:
        return int(os.getenv(key, default))
    except (ValueError, TypeError):
        return default


# ============== ENVIRONMENT ==============
APP_ENV = os.getenv("APP_ENV", "production").strip().lower()
DEVELOPMENT = APP_ENV == "development"

# ============== MONGODB CONFIGURATION ==============
MONGODB_URI = os.getenv("MONGODB_URI")

# Validate required settings
if not MONGODB_URI:
    raise ValueError("Please define the MONGODB_URI environment variable inside .env")

MONGODB_POOL_SIZE = get_int_env("MONGODB_POOL_SIZE", 50)
MONGODB_MIN_POOL_SIZE = get_int_env("MONGODB_MIN_POOL_SIZE", 0)
MONGODB_MAX_IDLE_TIME = get_int_env("MONGODB_MAX_IDLE_TIME", 30000)  # ms
MONGODB_CONNECT_TIMEOUT = get_int_env("MONGODB_CONNECT_TIMEOUT", 5000)  # ms
MONGODB_SERVER_SELECTION_TIMEOUT = get_int_env("MONGODB_SERVER_SELECTION_TIMEOUT", 5000)  # ms

# Keep the pending connection across importlib.reload() while iterating locally
MONGODB_REUSE_ACROSS_RELOADS = get_bool_env("MONGODB_REUSE_ACROSS_RELOADS", DEVELOPMENT)

# ============== DASHBOARD ==============
SITE_PAGE_COUNT_MODE = os.getenv("SITE_PAGE_COUNT_MODE", "live").strip().lower()

# ============== LOGGING ==============
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")


# ============== VALIDATION ==============
def validate_config():
    """Validate critical configuration"""
    errors = []

    if SITE_PAGE_COUNT_MODE not in ("live", "estimate"):
        errors.append(
            f"SITE_PAGE_COUNT_MODE must be 'live' or 'estimate', got {SITE_PAGE_COUNT_MODE!r}"
        )

    if MONGODB_POOL_SIZE < 1:
        errors.append("MONGODB_POOL_SIZE must be at least 1")

    if MONGODB_MIN_POOL_SIZE > MONGODB_POOL_SIZE:
        errors.append("MONGODB_MIN_POOL_SIZE cannot exceed MONGODB_POOL_SIZE")

    if errors:
        raise ValueError("\n".join(errors))


# Validate on import
validate_config()
