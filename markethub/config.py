"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./markethub.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key used to verify bearer tokens", min_length=1
    )
    access_token_algorithm: str = Field(
        default="HS256", description="Algorithm used to sign bearer tokens"
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="Africa/Lagos",
        description="IANA timezone (or UTC offset) used for notification timestamps",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Browser origins allowed to call the API",
    )
    notification_store: Literal["sql", "memory"] = Field(
        default="sql",
        description="Backend used to persist notifications",
    )
    notification_page_size: int = Field(
        default=50,
        description="Default number of notifications returned by listings",
        gt=0,
    )
    notification_feed_size: int = Field(
        default=20,
        description="Default number of notifications pushed to live subscribers",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_feed_size(self) -> "Settings":
        if self.notification_feed_size > self.notification_page_size:
            raise ValueError(
                "NOTIFICATION_FEED_SIZE must not exceed NOTIFICATION_PAGE_SIZE"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
