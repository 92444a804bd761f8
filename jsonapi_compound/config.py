from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Package settings loaded from environment variables with JSONAPI_ prefix."""

    # Validation
    allow_client_ids: bool = False
    # Include resolution
    resolve_nested_included: bool = False
    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="JSONAPI_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
