"""
City Lines - Backend Configuration

Settings come from environment variables (and .env).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from functools import lru_cache
from typing import Literal, Optional


LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    """Application settings."""

    # App
    APP_NAME: str = "City Lines"
    DEBUG: bool = False
    API_PREFIX: str = "/api/v1"
    ENVIRONMENT: Literal["development", "production"] = "development"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_GENERATE: int = 30  # per minute

    # Level generation
    GENERATION_MAX_ATTEMPTS: int = 10
    GENERATION_SEED_MULTIPLIER: int = 12345
    MAX_GRID_SIZE: int = 8

    # Level catalogue
    HANDCRAFTED_LEVEL_COUNT: int = 3
    LEVELS_DIR: Optional[str] = None  # defaults to the package's levels/
    LEVEL_CACHE_SIZE: int = 256

    # Sessions
    MAX_SESSIONS: int = 1000

    @field_validator("GENERATION_MAX_ATTEMPTS", "MAX_SESSIONS", "LEVEL_CACHE_SIZE")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"must be positive, got {value}")
        return value

    @field_validator("MAX_GRID_SIZE")
    @classmethod
    def validate_max_grid_size(cls, value: int) -> int:
        if value < 4:
            raise ValueError(f"MAX_GRID_SIZE must be at least 4, got {value}")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(LOG_LEVELS)}, got: {value}")
        return level

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parses CORS_ORIGINS into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """Settings (cached)."""
    return Settings()


settings = get_settings()
