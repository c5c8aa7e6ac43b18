"""
Apply API client configuration settings.

Dependencies: pydantic_settings
System role: HTTP transport configuration for the Apply API
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class ApplyClientSettings(BaseSettings):
    """Apply API connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="APPLY_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(
        default="http://localhost:4002",
        description="Apply API base URL",
    )
    access_token: str | None = Field(
        default=None,
        description="Bearer token sent with every request",
    )
    timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Per-request timeout",
    )
    progress_path: str = Field(
        default="/api/apply/automation/progress",
        description="Run progress endpoint (queried with ?runId=)",
    )
    apply_now_path: str = Field(
        default="/api/apply/automation/apply-now",
        description="Endpoint that starts an automation run",
    )
    regenerate_path: str = Field(
        default="/api/apply/sources/regenerate",
        description="Endpoint that regenerates job sources",
    )
    start_retry_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for starting a run on connect/timeout errors",
    )
