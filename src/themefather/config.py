"""Configuration management for Theme Father."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="THEMEFATHER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Telegram
    telegram_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("THEMEFATHER_TELEGRAM_TOKEN", "TELOXIDE_TOKEN", "TELEGRAM_BOT_TOKEN"),
        description="Bot token issued by @BotFather",
    )

    # Completion API
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("THEMEFATHER_OPENAI_API_KEY", "OPENAI_API_KEY"),
        description="Bearer token for the chat completions endpoint",
    )
    api_base: str = Field(default="https://api.openai.com/v1", description="Chat completions API base URL")
    model: str = Field(default="gpt-4o", description="Model used to draft themes")
    temperature: float = Field(default=0.2, ge=0.0, le=2.0, description="Sampling temperature")

    # Timeouts
    inactivity_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Longest allowed gap between two streamed chunks"
    )
    request_timeout_seconds: float = Field(default=600.0, gt=0, description="HTTP timeout for one completion")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")


def load_settings(**overrides: Any) -> Settings:
    """Load settings from the environment and ``.env``, applying explicit overrides."""

    settings = Settings()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if updates:
        settings = settings.model_copy(update=updates)
    return settings
