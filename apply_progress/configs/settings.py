"""
Unified application settings.

Aggregates the poller and client configuration into a single Settings
class shared by the CLI and the reference API.

Dependencies: pydantic_settings, apply_progress.configs
System role: Central configuration aggregator for the application
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from apply_progress.configs.client import ApplyClientSettings
from apply_progress.configs.poller import PollerSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    poller: PollerSettings = Field(default_factory=PollerSettings)
    client: ApplyClientSettings = Field(default_factory=ApplyClientSettings)

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are read once; call get_settings.cache_clear()
    to reload them.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
