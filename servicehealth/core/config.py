"""Application configuration and settings management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Service Health"
    APP_VERSION: str = "1.0.0"
    DESCRIPTION: str = (
        "Liveness and readiness endpoints reporting on the database and cache "
        "dependencies of the service."
    )
    ENVIRONMENT: Literal["development", "staging", "production", "testing"] = "development"

    API_PREFIX: str = "/api"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    DATABASE_URL: str = "sqlite+aiosqlite:///./service-health.db"
    REDIS_URL: str = "redis://localhost:6379/0"

    # Readiness probing
    CACHE_HEALTH_KEY: str = "health-check"
    CACHE_HEALTH_TTL_SECONDS: int | None = Field(default=None, gt=0)  # None keeps the key without expiry
    CACHE_WARM_ON_STARTUP: bool = False
    PROBE_TIMEOUT_SECONDS: float = Field(default=2.0, gt=0)
    PROBE_MAX_CONCURRENCY: int = Field(default=4, ge=1)


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()


settings = get_settings()
