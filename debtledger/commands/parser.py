"""
Chat Command Parsing

Turns a chat message such as "/add@DebtsBot 25.5 lunch" into a
ParsedCommand. Parsing never touches a ledger.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class CommandName(str, Enum):
    """Commands understood by the bot."""
    HELP = "help"
    START = "start"
    SETME = "setme"
    ADD = "add"
    SUB = "sub"
    TOTAL = "total"
    POP = "pop"
    RESET = "reset"
    RESTORE = "restore"
    HISTORY = "history"
    CLIENTS = "clients"


COMMAND_DESCRIPTIONS: dict[CommandName, str] = {
    CommandName.HELP: "show this text.",
    CommandName.START: "show this text.",
    CommandName.SETME: (
        "register yourself as owner of /add or /sub. "
        "Give the role ('adder' or 'subtractor')."
    ),
    CommandName.ADD: "save a positive amount.",
    CommandName.SUB: "save a negative amount.",
    CommandName.TOTAL: "compute the new total.",
    CommandName.POP: "remove the last amount (send 'confirm' to remove it).",
    CommandName.RESET: "reset the total to zero (send 'confirm' to reset it).",
    CommandName.RESTORE: (
        "restore the whole plan, including users and saved amounts "
        "(send 'confirm' to restore it)."
    ),
    CommandName.HISTORY: "show the amounts saved since the last total.",
    CommandName.CLIENTS: "show the users and their assigned commands.",
}


class ParsedCommand(BaseModel):
    """A command extracted from a chat message."""

    raw_name: str = Field(
        ...,
        description="Command name as typed, lowercased, without bot suffix"
    )
    name: Optional[CommandName] = Field(
        default=None,
        description="Recognized command, None if unknown"
    )
    argument: str = Field(
        default="",
        description="Everything after the command, stripped"
    )

    @property
    def first_token(self) -> str:
        """First whitespace-separated word of the argument."""
        parts = self.argument.split()
        return parts[0] if parts else ""


def parse_command(text: str) -> Optional[ParsedCommand]:
    """
    Parse a chat message into a command.

    Returns None for text that is not a command (no leading '/').
    """
    if not text:
        return None

    text = text.strip()
    if not text.startswith("/") or len(text) == 1:
        return None

    parts = text[1:].split(maxsplit=1)
    if not parts:
        return None
    head = parts[0]
    argument = parts[1].strip() if len(parts) > 1 else ""

    # "/total@SomeBot" addresses a specific bot in group chats
    raw_name = head.split("@", 1)[0].lower()

    try:
        name = CommandName(raw_name)
    except ValueError:
        name = None

    return ParsedCommand(raw_name=raw_name, name=name, argument=argument)


def describe_commands() -> str:
    """Help text listing every command."""
    lines = ["These commands are supported:", ""]
    for command, description in COMMAND_DESCRIPTIONS.items():
        lines.append(f"/{command.value} - {description}")
    return "\n".join(lines)
