"""Configuration package."""

from debtledger.config.settings import (
    AppSettings,
    LedgerSettings,
    Settings,
    TelegramSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "LedgerSettings",
    "Settings",
    "TelegramSettings",
    "get_settings",
    "validate_all_settings",
]
