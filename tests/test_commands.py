"""Tests for chat command parsing and dispatch."""

import pytest

from debtledger.commands import (
    CommandDispatcher,
    CommandName,
    describe_commands,
    parse_command,
)
from debtledger.commands.dispatcher import (
    AMOUNTS_RESET,
    INVALID_ROLE,
    MISSING_CONFIRM,
    MISSING_VALUE,
    NO_PARTICIPANTS,
    NOT_READY,
    NOTHING_TO_POP,
    PLAN_RESTORED,
    REGISTRATION_REJECTED,
)
from debtledger.ledger import ParticipantNotFoundError


CHAT = "-1001"


class TestParseCommand:
    """Tests for parse_command."""

    def test_plain_text_is_not_a_command(self):
        assert parse_command("hello") is None
        assert parse_command("") is None
        assert parse_command("/") is None

    def test_command_with_argument(self):
        command = parse_command("/add 25.5 lunch")
        assert command.name == CommandName.ADD
        assert command.argument == "25.5 lunch"
        assert command.first_token == "25.5"

    def test_bot_suffix_and_case(self):
        command = parse_command("/TOTAL@DebtsBot")
        assert command.name == CommandName.TOTAL
        assert command.raw_name == "total"
        assert command.argument == ""

    def test_unknown_command(self):
        command = parse_command("/dance now")
        assert command.name is None
        assert command.raw_name == "dance"

    def test_describe_lists_every_command(self):
        text = describe_commands()
        for name in CommandName:
            assert f"/{name.value} - " in text


@pytest.fixture
def dispatcher(service) -> CommandDispatcher:
    return CommandDispatcher(service, confirm_token="confirm")


@pytest.fixture
def ready(dispatcher):
    """Both participants registered in CHAT."""
    dispatcher.handle(CHAT, "101", "Ana", "/setme adder")
    dispatcher.handle(CHAT, "202", "Ben", "/setme subtractor")
    return dispatcher


class TestRegistrationCommands:
    """Tests for /setme and /clients."""

    def test_setme(self, dispatcher):
        reply = dispatcher.handle(CHAT, "101", "Ana", "/setme Adder")
        assert reply == "The role 'adder' was assigned to the user: Ana"

    def test_setme_invalid_role(self, dispatcher):
        assert dispatcher.handle(CHAT, "101", "Ana", "/setme wizard") == INVALID_ROLE
        assert dispatcher.handle(CHAT, "101", "Ana", "/setme") == INVALID_ROLE

    def test_setme_twice_is_rejected(self, dispatcher):
        dispatcher.handle(CHAT, "101", "Ana", "/setme adder")
        reply = dispatcher.handle(CHAT, "101", "Ana", "/setme subtractor")
        assert reply == REGISTRATION_REJECTED

    def test_third_user_is_rejected(self, ready):
        assert ready.handle(CHAT, "303", "Carl", "/setme adder") == REGISTRATION_REJECTED

    def test_clients(self, dispatcher, ready):
        assert dispatcher.handle("other", "1", "X", "/clients") == NO_PARTICIPANTS
        assert ready.handle(CHAT, "101", "Ana", "/clients") == "Ana | Adder\nBen | Subtractor"


class TestAmountCommands:
    """Tests for /add, /sub, /total, /pop and /history."""

    def test_add_requires_both_participants(self, dispatcher):
        dispatcher.handle(CHAT, "101", "Ana", "/setme adder")
        assert dispatcher.handle(CHAT, "101", "Ana", "/add 10") == NOT_READY

    def test_add_and_sub(self, ready):
        reply = ready.handle(CHAT, "101", "Ana", "/add 50")
        assert reply == "Saved.\nThe amount 50 increased the balance of Ana | Adder"

        reply = ready.handle(CHAT, "202", "Ben", "/sub 20.5 taxi")
        assert reply == "Saved.\nThe amount 20.5 increased the balance of Ben | Subtractor"

        assert ready.handle(CHAT, "101", "Ana", "/total") == "The current debt total is 29.5$"

    def test_missing_value(self, ready):
        assert ready.handle(CHAT, "101", "Ana", "/add") == MISSING_VALUE

    @pytest.mark.parametrize("token", ["abc", "nan", "inf", "1,5"])
    def test_invalid_value(self, ready, token):
        assert ready.handle(CHAT, "101", "Ana", f"/add {token}") == f"Invalid number: '{token}'"

    def test_sub_with_negative_input_adds(self, ready):
        """The typed sign is flipped, not forced."""
        ready.handle(CHAT, "202", "Ben", "/sub -5")
        assert ready.handle(CHAT, "101", "Ana", "/total") == "The current debt total is 5.0$"

    def test_total_not_ready(self, dispatcher):
        assert dispatcher.handle(CHAT, "101", "Ana", "/total") == NOT_READY

    def test_pop_needs_confirm(self, ready):
        ready.handle(CHAT, "101", "Ana", "/add 5")
        assert ready.handle(CHAT, "101", "Ana", "/pop") == MISSING_CONFIRM.format(token="confirm")
        assert ready.handle(CHAT, "101", "Ana", "/pop yes") == MISSING_CONFIRM.format(token="confirm")

    def test_pop(self, ready):
        ready.handle(CHAT, "101", "Ana", "/add 50")
        ready.handle(CHAT, "202", "Ben", "/sub 20")
        ready.handle(CHAT, "101", "Ana", "/total")

        assert ready.handle(CHAT, "202", "Ben", "/pop CONFIRM") == "The amount -20 was removed."
        assert ready.handle(CHAT, "101", "Ana", "/total") == "The current debt total is 50.0$"

    def test_pop_empty(self, ready):
        assert ready.handle(CHAT, "101", "Ana", "/pop confirm") == NOTHING_TO_POP

    def test_history(self, ready, service):
        ready.handle(CHAT, "101", "Ana", "/add 50")
        reply = ready.handle(CHAT, "101", "Ana", "/history")

        lines = reply.split("\n")
        assert lines[0].startswith("💲50, ")
        assert lines[1] == "Total:"
        assert lines[2].startswith("💲50, ")

    def test_unregistered_user_is_a_hard_failure(self, ready):
        with pytest.raises(ParticipantNotFoundError):
            ready.handle(CHAT, "303", "Carl", "/add 5")


class TestDestructiveCommands:
    """Tests for /reset and /restore."""

    def test_reset(self, ready, service):
        ready.handle(CHAT, "101", "Ana", "/add 50")
        assert ready.handle(CHAT, "101", "Ana", "/reset confirm") == AMOUNTS_RESET
        assert service.run(CHAT, lambda ledger: ledger.entries) == ()

    def test_reset_not_ready(self, dispatcher):
        assert dispatcher.handle(CHAT, "101", "Ana", "/reset confirm") == NOT_READY

    def test_restore_works_without_participants(self, dispatcher, service):
        assert dispatcher.handle(CHAT, "101", "Ana", "/restore confirm") == PLAN_RESTORED
        assert service.run(CHAT, lambda ledger: ledger.running_total.value) == 0.0

    def test_restore(self, ready, service):
        ready.handle(CHAT, "101", "Ana", "/add 50")
        assert ready.handle(CHAT, "101", "Ana", "/restore") == MISSING_CONFIRM.format(token="confirm")
        assert ready.handle(CHAT, "101", "Ana", "/restore confirm") == PLAN_RESTORED
        assert service.run(CHAT, lambda ledger: ledger.participants) == ()


class TestHelp:
    """Tests for help and unknown commands."""

    def test_non_command_ignored(self, dispatcher):
        assert dispatcher.handle(CHAT, "101", "Ana", "just chatting") is None

    @pytest.mark.parametrize("text", ["/help", "/start", "/dance"])
    def test_help_text(self, dispatcher, text):
        assert dispatcher.handle(CHAT, "101", "Ana", text) == describe_commands()
