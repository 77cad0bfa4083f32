"""
Telegram Bot Loop

Feeds Telegram messages to the CommandDispatcher and sends back
its replies. Each chat is one ledger; each sender is a participant.

DESIGN DECISION: One failing command never stops the bot.
An error inside a command aborts that command only. It is
audited, the chat gets a short failure message, and polling
continues.
"""

import time
from typing import Optional

import structlog

from debtledger.audit import AuditLogger
from debtledger.commands import CommandDispatcher
from debtledger.ledger import ParticipantNotFoundError
from debtledger.services.storage import StorageError
from debtledger.services.telegram import (
    IncomingMessage,
    TelegramClient,
    TelegramError,
    TelegramRateLimitError,
)


logger = structlog.get_logger(__name__)


LOAD_FAILED = "The debt plan could not be loaded."
NOT_A_PARTICIPANT = "You are not registered in this plan. Use /setme first."
COMMAND_FAILED = "Something went wrong, the command was not applied."


class TelegramBot:
    """Long-polling bot driving one CommandDispatcher."""

    def __init__(
        self,
        client: TelegramClient,
        dispatcher: CommandDispatcher,
        audit_logger: Optional[AuditLogger] = None,
        idle_sleep: float = 1.0,
    ):
        self._client = client
        self._dispatcher = dispatcher
        self._audit_logger = audit_logger or AuditLogger()
        self._idle_sleep = idle_sleep
        self._offset: Optional[int] = None

    @property
    def offset(self) -> Optional[int]:
        return self._offset

    def handle_message(self, message: IncomingMessage) -> Optional[str]:
        """Dispatch one message and return the reply (None if ignored)."""
        try:
            return self._dispatcher.handle(
                ledger_code=message.chat_id,
                user_code=message.user_id,
                user_name=message.user_name,
                text=message.text,
            )
        except StorageError as e:
            self._audit_logger.log_error(e, ledger_code=message.chat_id)
            return LOAD_FAILED
        except ParticipantNotFoundError as e:
            self._audit_logger.log_error(
                e,
                ledger_code=message.chat_id,
                details={"user_id": message.user_id, "text": message.text},
            )
            return NOT_A_PARTICIPANT
        except Exception as e:
            self._audit_logger.log_error(
                e,
                ledger_code=message.chat_id,
                details={"user_id": message.user_id, "text": message.text},
            )
            return COMMAND_FAILED

    def handle_update(self, update: dict) -> None:
        """Process one raw update and advance the polling offset."""
        self._offset = update["update_id"] + 1

        message = IncomingMessage.from_update(update)
        if message is None:
            return

        reply = self.handle_message(message)
        if reply is None:
            return

        try:
            self._client.send_message(message.chat_id, reply)
        except TelegramError as e:
            self._audit_logger.log_external_service_error("telegram", e)

    def poll_once(self) -> int:
        """Fetch and process one batch of updates. Returns its size."""
        updates = self._client.get_updates(offset=self._offset)
        for update in updates:
            self.handle_update(update)
        return len(updates)

    def run_forever(self) -> None:
        logger.info("bot_started")
        while True:
            try:
                self.poll_once()
            except TelegramRateLimitError as e:
                logger.warning("bot_rate_limited", retry_after=e.retry_after)
                time.sleep(e.retry_after)
            except TelegramError as e:
                self._audit_logger.log_external_service_error("telegram", e)
                time.sleep(self._idle_sleep)
