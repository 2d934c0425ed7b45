"""Application configuration settings."""

from functools import lru_cache
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    database_url: str = "shortify.db"

    # Application
    app_title: str = "Shortify"
    app_version: str = "0.1.0"
    app_description: str = "Short, unique links with optional expiration"
    log_level: str = "INFO"

    # Short links
    base_url: str = "http://localhost:8000"
    code_strategy: Literal["random", "counter"] = "random"
    code_length: int = 5
    max_retries: int = 10
    min_short_code_length: int = 3
    max_short_code_length: int = 20

    # Counter strategy
    hashids_salt: str = "default-salt-change-in-production"
    counter_min_length: int = 7
    counter_backend: Literal["sqlite", "redis"] = "sqlite"
    counter_key: str = "shortify:counter"
    redis_url: str = "redis://localhost:6379/0"

    @model_validator(mode="after")
    def check_code_lengths(self) -> "Settings":
        # Generated codes must pass the redirect route's format check
        if not self.min_short_code_length <= self.code_length <= self.max_short_code_length:
            raise ValueError(
                f"code_length must be between {self.min_short_code_length} "
                f"and {self.max_short_code_length}"
            )
        if self.counter_min_length > self.max_short_code_length:
            raise ValueError(
                f"counter_min_length cannot exceed {self.max_short_code_length}"
            )
        return self


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
