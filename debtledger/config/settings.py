"""
Configuration Management for Debts With Friends

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger core only needs a storage directory and a clock offset,
the bot needs a token. Everything is validated at startup.
"""

from datetime import timedelta, timezone
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Ledger persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: str = Field(
        default="database",
        description="Directory holding one JSON document per ledger"
    )
    utc_offset_hours: int = Field(
        default=-4,
        ge=-12,
        le=14,
        description="Fixed UTC offset used to stamp entries and totals"
    )
    confirm_token: str = Field(
        default="confirm",
        min_length=1,
        description="Literal argument required by destructive commands"
    )

    @field_validator('confirm_token')
    @classmethod
    def normalize_confirm_token(cls, v: str) -> str:
        """Tokens are compared case-insensitively."""
        return v.strip().lower()

    @property
    def tzinfo(self) -> timezone:
        """Fixed-offset timezone for ledger timestamps."""
        return timezone(timedelta(hours=self.utc_offset_hours))


class TelegramSettings(BaseSettings):
    """Telegram bot transport configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TELEGRAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    bot_token: str = Field(
        ...,
        description="Bot API token issued by BotFather"
    )
    poll_timeout: int = Field(
        default=30,
        ge=0,
        le=50,
        description="Long polling timeout in seconds for getUpdates"
    )
    request_timeout: int = Field(
        default=40,
        ge=1,
        description="HTTP timeout in seconds (must exceed poll_timeout)"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Loaded lazily so the core works without a bot token

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def telegram(self) -> TelegramSettings:
        return TelegramSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an
    additional "<name>_error" entry for each failing section.
    """
    results = {}

    settings = get_settings()

    for name in ("ledger", "telegram", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
