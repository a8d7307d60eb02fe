"""
backend/bettracker/config.py

Purpose:
    Central settings loading for the tracker backend and its API client.

Dependencies:
    - pydantic-settings
    - pathlib
"""

from pathlib import Path

from pydantic_settings import BaseSettings

# Prefer backend/.env, fallback to project-root .env.
_BACKEND_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"
_ROOT_ENV_FILE = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    APP_NAME: str = "BetTracker"
    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: str = "http://localhost:3000"

    # Plan limits
    FREE_PLAN_BET_LIMIT: int = 15

    # Wager input bounds
    MAX_STAKE: float = 10000.0
    NOTES_MAX_LENGTH: int = 500

    # Remote wager API (CRUD endpoints consumed by the sync layer)
    WAGER_API_BASE_URL: str = "http://localhost:3000"
    WAGER_API_TIMEOUT_SECONDS: float = 15.0
    WAGER_API_MAX_RETRIES: int = 2
    WAGER_API_RETRY_BASE_DELAY: float = 1.0
    WAGER_API_RETRY_MAX_DELAY: float = 30.0

    model_config = {
        "env_file": (str(_BACKEND_ENV_FILE), str(_ROOT_ENV_FILE)),
        "extra": "ignore",
    }


settings = Settings()
