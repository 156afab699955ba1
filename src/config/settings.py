"""
Application Settings - Pydantic-based configuration management.

Loads settings from environment variables with validation and type coercion.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Jira
    # -------------------------------------------------------------------------
    jira_url: str = Field(default="", description="Jira instance URL")
    jira_user: str = Field(default="", description="Jira user email (basic auth)")
    jira_api_token: str = Field(default="", description="Jira API token (basic auth)")
    jira_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Total timeout in seconds for a single Jira request",
    )
    jira_page_size: int = Field(
        default=50,
        ge=1,
        le=100,
        description="Issues requested per search; only the first page is read",
    )
    jira_env: str = Field(default="production", description="Label attached to Jira log records")

    # -------------------------------------------------------------------------
    # Server
    # -------------------------------------------------------------------------
    environment: str = Field(default="development", description="Environment (development/production)")
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=4000, ge=1, le=65535, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Root log level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Singleton Settings instance.
    """
    return Settings()
