"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "OpsTracker"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["auto", "json", "console"] = Field(
        default="auto",
        description="Log renderer; 'auto' picks console output in debug mode",
    )

    # Storage
    storage_backend: Literal["redis", "memory"] = Field(
        default="redis",
        description="Backend holding the operation log and admin settings",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )
    redis_max_connections: int = Field(
        default=20,
        ge=1,
        description="Connection pool size",
    )
    storage_key_prefix: str = Field(
        default="opstracker",
        min_length=1,
        description="Prefix for the log and settings keys",
    )

    # Alert notification
    alert_channels: list[Literal["console", "email"]] = Field(
        default_factory=lambda: ["console"],
        description="Channels used when a usage alert is dispatched",
    )

    # Email (optional)
    smtp_host: str = Field(default="", description="SMTP server host")
    smtp_port: int = Field(default=587, description="SMTP server port")
    smtp_user: str = Field(default="", description="SMTP username")
    smtp_password: str = Field(default="", description="SMTP password")
    smtp_from: str = Field(default="", description="Email sender address")
    smtp_use_tls: bool = Field(default=True, description="Use STARTTLS (port 587). Set False for SSL (port 465)")
    smtp_timeout: int = Field(default=10, ge=1, description="SMTP timeout in seconds")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
