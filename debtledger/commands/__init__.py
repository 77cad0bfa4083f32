"""Chat command parsing and dispatch."""

from debtledger.commands.dispatcher import CommandDispatcher
from debtledger.commands.parser import (
    COMMAND_DESCRIPTIONS,
    CommandName,
    ParsedCommand,
    describe_commands,
    parse_command,
)

__all__ = [
    "COMMAND_DESCRIPTIONS",
    "CommandDispatcher",
    "CommandName",
    "ParsedCommand",
    "describe_commands",
    "parse_command",
]
