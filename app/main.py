"""
Telegram Bot Entry Point for Debts With Friends

Two friends in a group chat keep a running debt between them:
- Each registers once with /setme adder or /setme subtractor
- /add and /sub record amounts, /total folds them into the balance
- Destructive commands need an explicit 'confirm'

Run with TELEGRAM_BOT_TOKEN set (environment or .env):
    python app/main.py
"""

import sys

import structlog

from debtledger.audit import configure_logging
from debtledger.bot import TelegramBot
from debtledger.config import get_settings, validate_all_settings
from debtledger.orchestrator import create_app_components
from debtledger.services.telegram import TelegramClient


logger = structlog.get_logger("debtledger.app")


def main() -> int:
    """Validate configuration, wire components and poll forever."""
    configure_logging(get_settings().app.log_level)

    status = validate_all_settings()
    for section in ("ledger", "telegram"):
        if not status.get(section, False):
            logger.error(
                "settings_invalid",
                section=section,
                error=status.get(f"{section}_error", "Not configured"),
            )
            return 1

    _, dispatcher, audit_logger = create_app_components()
    bot = TelegramBot(TelegramClient.from_settings(), dispatcher, audit_logger)

    logger.info(
        "bot_starting",
        data_dir=get_settings().ledger.data_dir,
        environment=get_settings().app.app_environment,
    )
    try:
        bot.run_forever()
    except KeyboardInterrupt:
        logger.info("bot_stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
