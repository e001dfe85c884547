"""Application configuration via Pydantic BaseSettings."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    development = "development"
    staging = "staging"
    production = "production"


class StorageBackend(str, Enum):
    memory = "memory"
    json = "json"
    redis = "redis"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Environment
    ENVIRONMENT: Environment = Environment.development

    # Logging
    LOG_LEVEL: str = "INFO"

    # Snapshot storage
    STORAGE_BACKEND: StorageBackend = StorageBackend.json
    STORAGE_DIR: str = "./data"  # Used by the json backend only
    STORAGE_KEY_PREFIX: str = "hl_"
    REDIS_URL: str = "redis://localhost:6379/0"

    # Load the sample contacts/deals/activities when a collection has never been saved
    SEED_SAMPLE_DATA: bool = True

    # Dashboard
    RECENT_ACTIVITY_LIMIT: int = Field(default=5, ge=1)

    # CORS
    CORS_ALLOWED_ORIGINS: str = "*"

    def storage_key(self, kind: str) -> str:
        """Return the storage key for one record collection (e.g. ``hl_contacts``)."""
        return f"{self.STORAGE_KEY_PREFIX}{kind}"


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
