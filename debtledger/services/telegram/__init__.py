"""Telegram transport package."""

from debtledger.services.telegram.client import IncomingMessage, TelegramClient
from debtledger.services.telegram.errors import (
    TelegramApiError,
    TelegramError,
    TelegramForbiddenError,
    TelegramNetworkError,
    TelegramRateLimitError,
)

__all__ = [
    "IncomingMessage",
    "TelegramClient",
    # Errors
    "TelegramApiError",
    "TelegramError",
    "TelegramForbiddenError",
    "TelegramNetworkError",
    "TelegramRateLimitError",
]
