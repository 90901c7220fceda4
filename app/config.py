"""Application configuration."""
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Environment variables take precedence over .env file.
    SECRET_KEY has no default and may not be empty: the app refuses to
    start without it.
    """

    APP_NAME: str = "RBAC Todo API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./todos.db"

    # JWT Settings
    SECRET_KEY: str = Field(min_length=1)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Password hashing (argon2 time cost)
    PASSWORD_HASH_TIME_COST: int = 2

    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        # Only load .env file if it exists (for local dev)
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()
