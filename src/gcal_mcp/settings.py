"""
Application settings with environment variable support.

All settings can be overridden via GCAL_MCP_* environment variables.
The access token is also read from GOOGLE_ACCESS_TOKEN.
Supports both local (stdio) and cloud (http) modes.
"""

from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_URL = "https://www.googleapis.com/calendar/v3"


class Settings(BaseSettings):
    """Google Calendar MCP configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GCAL_MCP_",
        env_file=".env",
        extra="ignore",
    )

    # Pre-obtained OAuth access token, never refreshed
    access_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GOOGLE_ACCESS_TOKEN", "GCAL_MCP_ACCESS_TOKEN"),
    )

    # Calendar API
    api_base_url: str = BASE_URL
    rate_limit_interval: float = 0.1  # 10 req/s
    retry_fallback_delay: float = 1.0
    request_timeout: float = 30.0

    # Transport mode
    transport_mode: Literal["stdio", "http"] = "stdio"
    http_host: str = "0.0.0.0"
    http_port: int = 8000

    # API key for HTTP transport (optional)
    api_key: Optional[str] = None

    log_level: str = "INFO"

    def is_http_mode(self) -> bool:
        """Check if running with HTTP transport."""
        return self.transport_mode == "http"


# Global settings instance
settings = Settings()
