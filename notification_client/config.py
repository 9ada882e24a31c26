"""Client configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Notification client configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    api_base_url: str = Field(
        default="http://localhost:3000",
        description="Origin of the remote notification store",
        min_length=1,
    )
    api_prefix: str = Field(
        default="/api",
        description="Path prefix placed before the notification routes",
    )
    access_token: str | None = Field(
        default=None,
        description="Bearer token sent with every store request",
    )
    poll_interval_seconds: float = Field(
        default=30.0,
        description="Seconds between two poll cycles",
        gt=0,
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to every store request",
        gt=0,
    )
    checkpoint_database_url: str = Field(
        default="sqlite:///./notification_client.db",
        description="SQLAlchemy URL of the database holding the poll checkpoint",
        min_length=1,
    )
    checkpoint_key: str = Field(
        default="lastNotificationCheck",
        description="Key under which the last successful poll time is stored",
        min_length=1,
    )
    notification_icon: str = Field(
        default="/logo192.png",
        description="Icon shown with platform notifications",
    )
    default_page_size: int = Field(
        default=20,
        description="Page size used when listing notifications without a limit",
        gt=0,
    )

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("api_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.strip().strip("/")
        return f"/{value}" if value else ""


@lru_cache
def get_settings() -> Settings:
    """Return cached client settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
