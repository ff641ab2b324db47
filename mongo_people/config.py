"""
config.py
---------
Loads settings from the environment. A .env file in the working directory
is read first, without overriding variables that are already set.
"""

import os

from dotenv import find_dotenv, load_dotenv

from .utilities.setup_error import SetupError

load_dotenv(find_dotenv(usecwd=True))


# ── MongoDB ───────────────────────────────────────────────
DEFAULT_DB_NAME: str = "people_db"
DEFAULT_SERVER_SELECTION_TIMEOUT_MS: int = 5000

# ── Logging ───────────────────────────────────────────────
DEFAULT_LOG_LEVEL: str = "INFO"
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_mongo_uri() -> str:
    """
    Connection string for the MongoDB server.

    Raises:
        SetupError: If MONGO_URI is not set.
    """
    mongo_uri = os.getenv("MONGO_URI", "").strip()
    if not mongo_uri:
        raise SetupError("Please set MONGO_URI in your environment variables.")
    return mongo_uri


def get_mongo_db_name() -> str | None:
    """Database name, or None to use the database named in MONGO_URI."""
    return os.getenv("MONGO_DB_NAME", "").strip() or None


def get_server_selection_timeout_ms() -> int:
    raw = os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "").strip()
    if not raw:
        return DEFAULT_SERVER_SELECTION_TIMEOUT_MS
    try:
        timeout_ms = int(raw)
    except ValueError:
        raise SetupError(f"MONGO_SERVER_SELECTION_TIMEOUT_MS must be an integer. Got '{raw}'.")
    if timeout_ms <= 0:
        raise SetupError(f"MONGO_SERVER_SELECTION_TIMEOUT_MS must be positive. Got {timeout_ms}.")
    return timeout_ms


def get_log_level() -> str:
    """
    Console log level name.

    Raises:
        SetupError: If MONGO_PEOPLE_LOG_LEVEL is not a logging level name.
    """
    level = os.getenv("MONGO_PEOPLE_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if level not in LOG_LEVELS:
        raise SetupError(f"MONGO_PEOPLE_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}. Got '{level}'.")
    return level

