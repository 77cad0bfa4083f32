"""
Command Dispatcher

The thin adapter between chat messages and the ledger. It checks
the preconditions a chat user can get wrong (missing role, missing
'confirm', ledger not ready, unparseable number) and answers with a
plain-text reply. Everything else is the Ledger's job.

Storage errors and unknown participants are NOT turned into replies
here. They propagate to the transport, which decides how to report
a failed operation.
"""

import math
from typing import TYPE_CHECKING, Callable, Optional

from debtledger.config import get_settings
from debtledger.commands.parser import (
    CommandName,
    ParsedCommand,
    describe_commands,
    parse_command,
)
from debtledger.ledger import Ledger, ParticipantNotFoundError
from debtledger.models.audit import AuditEventBuilder
from debtledger.models.ledger import Participant, Role, format_value

if TYPE_CHECKING:
    from debtledger.orchestrator import LedgerService


# Replies
NOT_READY = (
    "Invalid action.\n"
    "Both participants must first use /setme to register their role."
)
INVALID_ROLE = "Please send a valid role ('adder' or 'subtractor')."
REGISTRATION_REJECTED = (
    "Registration failed.\n"
    "The user may already be registered or both roles are taken. "
    "Use /clients to check."
)
MISSING_VALUE = "Please send a valid value."
MISSING_CONFIRM = "Invalid argument. You must send '{token}' to run this action."
NOTHING_TO_POP = "There is no amount to remove."
AMOUNTS_RESET = "The plan amounts have been removed."
PLAN_RESTORED = "The plan has been restored to its default values."
NO_PARTICIPANTS = "No participants configured yet."


Handler = Callable[[Ledger, ParsedCommand, str, str], str]


class CommandDispatcher:
    """
    Routes parsed commands to ledger operations.

    Each command runs inside LedgerService.run, so it sees a freshly
    loaded ledger and holds that ledger's lock while it runs.
    """

    def __init__(
        self,
        service: "LedgerService",
        audit_logger=None,
        confirm_token: Optional[str] = None,
    ):
        self._service = service
        self._audit_logger = audit_logger
        self._confirm_token = (
            confirm_token or get_settings().ledger.confirm_token
        ).lower()
        self._handlers: dict[CommandName, Handler] = {
            CommandName.SETME: self._set_me,
            CommandName.ADD: self._save_amount,
            CommandName.SUB: self._save_amount,
            CommandName.TOTAL: self._total,
            CommandName.POP: self._pop,
            CommandName.RESET: self._reset,
            CommandName.RESTORE: self._restore,
            CommandName.HISTORY: self._history,
            CommandName.CLIENTS: self._clients,
        }

    def handle(
        self,
        ledger_code: str,
        user_code: str,
        user_name: str,
        text: str,
    ) -> Optional[str]:
        """
        Handle one chat message.

        Returns the reply text, or None if the message is not a command.

        Raises:
            StorageError: If the ledger cannot be loaded or saved
            ParticipantNotFoundError: If a non-registered user runs a
                command that needs their participant record
        """
        command = parse_command(text)
        if command is None:
            return None

        if self._audit_logger:
            self._audit_logger.log(
                AuditEventBuilder.command_received(
                    ledger_code, user_code, command.raw_name,
                )
            )

        if command.name is None or command.name in (CommandName.HELP, CommandName.START):
            return describe_commands()

        handler = self._handlers[command.name]
        return self._service.run(
            ledger_code,
            lambda ledger: handler(ledger, command, user_code, user_name),
        )

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def _set_me(self, ledger: Ledger, command: ParsedCommand, user_code: str, user_name: str) -> str:
        role = Role.parse(command.first_token)
        if role is None:
            return INVALID_ROLE

        participant = Participant(code=user_code, name=user_name, role=role)
        if ledger.register(participant) is None:
            return REGISTRATION_REJECTED

        return (
            f"The role '{role.value.lower()}' was assigned to the user: "
            f"{participant.name}"
        )

    def _save_amount(self, ledger: Ledger, command: ParsedCommand, user_code: str, user_name: str) -> str:
        if not ledger.both_registered():
            return NOT_READY

        token = command.first_token
        if not token:
            return MISSING_VALUE

        try:
            parsed = float(token)
        except ValueError:
            return f"Invalid number: '{token}'"
        if not math.isfinite(parsed):
            return f"Invalid number: '{token}'"

        if command.name == CommandName.ADD:
            value, role = parsed, Role.ADDER
        else:
            value, role = -parsed, Role.SUBTRACTOR

        if ledger.record_entry(value, user_code) is None:
            return NOT_READY

        return (
            "Saved.\n"
            f"The amount {format_value(abs(value))} increased the balance of "
            f"{self._role_holder(ledger, role)}"
        )

    def _total(self, ledger: Ledger, command: ParsedCommand, user_code: str, user_name: str) -> str:
        if not ledger.both_registered():
            return NOT_READY

        total = ledger.compute_total(user_code)
        return f"The current debt total is {total.value:.1f}$"

    def _pop(self, ledger: Ledger, command: ParsedCommand, user_code: str, user_name: str) -> str:
        if not ledger.both_registered():
            return NOT_READY
        if not self._confirmed(command):
            return MISSING_CONFIRM.format(token=self._confirm_token)

        removed = ledger.pop_last(user_code)
        if removed is None:
            return NOTHING_TO_POP
        return f"The amount {format_value(removed.value)} was removed."

    def _reset(self, ledger: Ledger, command: ParsedCommand, user_code: str, user_name: str) -> str:
        if not ledger.both_registered():
            return NOT_READY
        if not self._confirmed(command):
            return MISSING_CONFIRM.format(token=self._confirm_token)

        ledger.reset_amounts(user_code)
        return AMOUNTS_RESET

    def _restore(self, ledger: Ledger, command: ParsedCommand, user_code: str, user_name: str) -> str:
        if not self._confirmed(command):
            return MISSING_CONFIRM.format(token=self._confirm_token)

        ledger.restore()
        return PLAN_RESTORED

    def _history(self, ledger: Ledger, command: ParsedCommand, user_code: str, user_name: str) -> str:
        if not ledger.both_registered():
            return NOT_READY

        return ledger.history(user_code)

    def _clients(self, ledger: Ledger, command: ParsedCommand, user_code: str, user_name: str) -> str:
        return ledger.show_participants() or NO_PARTICIPANTS

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _confirmed(self, command: ParsedCommand) -> bool:
        return command.argument.lower() == self._confirm_token

    @staticmethod
    def _role_holder(ledger: Ledger, role: Role) -> str:
        try:
            return str(ledger.participant_by_role(role))
        except ParticipantNotFoundError:
            return f"(nobody registered as {role.value})"
