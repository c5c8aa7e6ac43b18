"""
Poller configuration settings.

Timing contract for progress polling: fetch cadence, auto-close delay
after completion and the threshold of the "taking longer" warning.

Dependencies: pydantic_settings
System role: Poller timing configuration
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class PollerSettings(BaseSettings):
    """Progress poller configuration."""

    model_config = SettingsConfigDict(
        env_prefix="POLLER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Seconds between progress fetches",
    )
    close_delay_seconds: float = Field(
        default=3.0,
        ge=0,
        description="Delay before the close signal fires after a completed run",
    )
    stuck_threshold_seconds: int = Field(
        default=30,
        ge=0,
        description="Elapsed seconds without fetched jobs before warning the user",
    )
    accept_envelope: bool = Field(
        default=True,
        description="Accept progress bodies wrapped in a {'data': ...} envelope",
    )
