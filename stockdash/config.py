from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Stock Dashboard"
    ENVIRONMENT: str = "local"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Backend
    # ==============================
    BACKEND_MODE: str = "rest"
    BACKEND_URL: str = "http://localhost:3001"
    BACKEND_TIMEOUT_SECONDS: int = 15

    # ==============================
    # Database (BACKEND_MODE=sql)
    # ==============================
    DATABASE_URL: str = "sqlite:///./stockdash.db"

    # ==============================
    # Security
    # ==============================
    API_KEYS: Optional[str] = None
    API_KEY_HEADER: str = "X-API-Key"


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
