"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.constants import (
    DEFAULT_PORT,
    FACEBOOK_API_TIMEOUT_SECONDS,
    FACEBOOK_GRAPH_API_URL,
    FACEBOOK_GRAPH_API_VERSION,
)
from src.models.config_models import GraphAPIConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Later files override earlier ones, so .env.local takes precedence
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Facebook Configuration
    facebook_verify_token: str = Field(..., description="Webhook verification token")
    facebook_page_access_token: str = Field(
        default="",
        description="Page access token returned by the default page token resolver",
    )
    facebook_graph_api_url: str = Field(
        default=FACEBOOK_GRAPH_API_URL,
        description="Graph API base URL (override to point at a fake endpoint)",
    )
    facebook_graph_api_version: str = Field(
        default=FACEBOOK_GRAPH_API_VERSION,
        description="Graph API version segment, e.g. v2.6",
    )
    facebook_api_timeout_seconds: float = Field(
        default=FACEBOOK_API_TIMEOUT_SECONDS,
        description="Timeout for Facebook Graph API calls (seconds)",
    )

    # Environment
    env: Literal["local", "railway", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="Python logging level")
    port: int = Field(default=DEFAULT_PORT, description="Port to serve the bot on")

    # Sentry Configuration
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )
    sentry_traces_sample_rate: float = Field(
        default=1.0, description="Sentry traces sample rate (0.0 to 1.0)"
    )

    # Logfire Configuration
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token for observability"
    )

    def graph_api_config(self) -> GraphAPIConfig:
        """Build the Graph API client configuration from these settings."""
        return GraphAPIConfig(
            base_url=self.facebook_graph_api_url,
            api_version=self.facebook_graph_api_version,
            timeout_seconds=self.facebook_api_timeout_seconds,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
