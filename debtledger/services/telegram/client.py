"""
Telegram Bot API Client

Minimal long-polling client: getUpdates and sendMessage are all the
bot needs.

DESIGN DECISION: Network failures are retried with tenacity, API
errors are not. A 400 "chat not found" will not get better on the
second try, a dropped connection usually does.
"""

from typing import Any, Optional

import requests
import structlog
from pydantic import BaseModel, Field
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from debtledger.config import get_settings
from debtledger.services.telegram.errors import (
    TelegramApiError,
    TelegramForbiddenError,
    TelegramNetworkError,
    TelegramRateLimitError,
)


logger = structlog.get_logger(__name__)


class IncomingMessage(BaseModel):
    """The parts of a Telegram update the bot acts on."""

    update_id: int
    chat_id: str = Field(..., description="Chat id, used as the ledger code")
    user_id: str = Field(..., description="Sender id, used as the participant code")
    user_name: str = Field(..., description="Sender full name")
    text: str

    @classmethod
    def from_update(cls, update: dict[str, Any]) -> Optional["IncomingMessage"]:
        """
        Extract a text message from a raw update.

        Returns None for updates without a text message or sender
        (edits, channel posts, stickers...).
        """
        message = update.get("message")
        if not message:
            return None

        text = message.get("text")
        sender = message.get("from")
        chat = message.get("chat")
        if not text or not sender or not chat:
            return None

        name_parts = [sender.get("first_name", ""), sender.get("last_name") or ""]
        full_name = " ".join(part for part in name_parts if part)

        return cls(
            update_id=update["update_id"],
            chat_id=str(chat["id"]),
            user_id=str(sender["id"]),
            user_name=full_name,
            text=text,
        )


class TelegramClient:
    """
    HTTP client for the Telegram Bot API.

    Normalizes every failure into a TelegramError subclass.
    """

    BASE_URL = "https://api.telegram.org/bot{token}/{method}"

    def __init__(
        self,
        token: str,
        poll_timeout: int = 30,
        request_timeout: int = 40,
        session: Optional[requests.Session] = None,
    ):
        self._token = token
        self._poll_timeout = poll_timeout
        self._request_timeout = request_timeout
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls) -> "TelegramClient":
        """Build a client from TELEGRAM_* settings."""
        settings = get_settings().telegram
        return cls(
            token=settings.bot_token,
            poll_timeout=settings.poll_timeout,
            request_timeout=settings.request_timeout,
        )

    def get_updates(self, offset: Optional[int] = None) -> list[dict[str, Any]]:
        """Long-poll for updates newer than offset."""
        payload: dict[str, Any] = {
            "timeout": self._poll_timeout,
            "allowed_updates": ["message"],
        }
        if offset is not None:
            payload["offset"] = offset
        return self._post("getUpdates", payload)

    def send_message(self, chat_id: str, text: str) -> dict[str, Any]:
        """Send a plain text message."""
        return self._post("sendMessage", {"chat_id": chat_id, "text": text})

    @retry(
        retry=retry_if_exception_type(TelegramNetworkError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _post(self, method: str, data: dict[str, Any]) -> Any:
        url = self.BASE_URL.format(token=self._token, method=method)

        try:
            response = self._session.post(url, json=data, timeout=self._request_timeout)
            response_data = response.json()
        except requests.RequestException as e:
            logger.warning("telegram_network_error", method=method, error=str(e))
            raise TelegramNetworkError(f"Request failed: {e}") from e
        except ValueError as e:
            logger.warning("telegram_invalid_json", method=method, error=str(e))
            raise TelegramNetworkError("Invalid JSON response") from e

        if not response_data.get("ok"):
            self._raise_api_error(response_data)

        return response_data.get("result")

    @staticmethod
    def _raise_api_error(data: dict[str, Any]) -> None:
        error_code = data.get("error_code", 0)
        description = data.get("description", "Unknown error")
        parameters = data.get("parameters") or {}

        logger.warning("telegram_api_error", error_code=error_code, description=description)

        if error_code == 429:
            raise TelegramRateLimitError(
                error_code,
                description,
                parameters,
                retry_after=int(parameters.get("retry_after", 5)),
            )
        if error_code == 403:
            raise TelegramForbiddenError(error_code, description, parameters)
        raise TelegramApiError(error_code, description, parameters)
