"""Environment variables that drive the deployment.

Most values reach the application through ``${VAR}`` placeholders in
config.yaml. ``EnvironmentVariables`` reads the same variables directly, with
``.env`` support, for the places that need to know what the environment itself
provides: the no-config-file fallback and the startup diagnostics.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
    port: int | None = Field(default=None, validation_alias="PORT")

    @property
    def database_url_source(self) -> str:
        """Where the effective connection string comes from."""
        return "environment" if self.database_url else "config"
