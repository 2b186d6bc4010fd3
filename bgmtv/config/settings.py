"""Client settings loaded from the environment."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.bgm.tv"


class Settings(BaseSettings):
    """Settings loaded from BGM_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="BGM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # API
    base_url: str = Field(default=DEFAULT_BASE_URL, description="bgm.tv API root")
    user_agent: str = Field(
        default="",
        description="User-Agent, formatted as <developer>/<app>/<version> (<url>)"
    )
    token: Optional[str] = Field(default=None, description="Bearer access token")
    timeout_seconds: Optional[float] = Field(
        default=None,
        description="Total request timeout; unset keeps the aiohttp default"
    )

    # Application Settings
    app_env: str = Field(default="development", description="Application environment")
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Debug mode")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v

    @field_validator("token")
    @classmethod
    def blank_token_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
