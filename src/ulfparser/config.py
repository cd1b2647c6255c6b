"""Configuration via pydantic-settings: 12-factor app style."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """ulfparser configuration: loaded from env vars / .env file."""

    model_config = SettingsConfigDict(env_prefix="ULFPARSER_", env_file=".env", extra="ignore")

    chunk_size: int = Field(default=4096, gt=0, description="Bytes read from the input stream per refill")
    default_output: str = Field(default="json", description="Default CLI output format (json|stream|table)")
    log_level: str = Field(default="WARNING", description="CLI logging level when --verbose is not given")


settings = Settings()
