"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with sensible defaults.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from job_lock.constants import DEFAULT_LOCK_TIMEOUT_SECONDS, LOCK_KEY_PREFIX


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout_seconds: float | None = 5.0

    # Locking
    lock_key_prefix: str = LOCK_KEY_PREFIX
    lock_default_timeout_seconds: int = Field(default=DEFAULT_LOCK_TIMEOUT_SECONDS, gt=0)

    # Observability
    otel_exporter_otlp_endpoint: str | None = None
    otel_service_name: str = "job-lock"
    log_level: str = "INFO"
    log_format: str = "json"  # json or console


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
