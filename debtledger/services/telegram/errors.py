"""Errors raised by the Telegram Bot API client."""

from typing import Optional


class TelegramError(Exception):
    """Base class for Telegram API errors."""
    pass


class TelegramNetworkError(TelegramError):
    """Network connectivity error or unreadable response."""
    pass


class TelegramApiError(TelegramError):
    """Error returned by the Bot API (ok == false)."""

    def __init__(
        self,
        error_code: int,
        description: str,
        parameters: Optional[dict] = None,
    ):
        super().__init__(f"Telegram API error {error_code}: {description}")
        self.error_code = error_code
        self.description = description
        self.parameters = parameters or {}


class TelegramRateLimitError(TelegramApiError):
    """HTTP 429, the API asks us to wait retry_after seconds."""

    def __init__(
        self,
        error_code: int,
        description: str,
        parameters: Optional[dict] = None,
        retry_after: int = 0,
    ):
        super().__init__(error_code, description, parameters)
        self.retry_after = retry_after


class TelegramForbiddenError(TelegramApiError):
    """Bot blocked or kicked from the chat."""
    pass
