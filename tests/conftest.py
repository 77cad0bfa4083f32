"""Shared fixtures for Debts With Friends tests."""

from datetime import datetime, timedelta, timezone

import pytest

from debtledger.ledger import Ledger
from debtledger.models.ledger import Participant, Role
from debtledger.orchestrator import LedgerService
from debtledger.services.storage import InMemoryLedgerStorage


LEDGER_TZ = timezone(timedelta(hours=-4))


class FakeClock:
    """Deterministic clock: each call is one second after the previous."""

    def __init__(self, start: datetime = datetime(2024, 5, 1, 12, 0, tzinfo=LEDGER_TZ)):
        self.current = start

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> InMemoryLedgerStorage:
    return InMemoryLedgerStorage()


@pytest.fixture
def ana() -> Participant:
    return Participant(code="101", name="Ana", role=Role.ADDER)


@pytest.fixture
def ben() -> Participant:
    return Participant(code="202", name="Ben", role=Role.SUBTRACTOR)


@pytest.fixture
def ledger(storage, clock) -> Ledger:
    """Empty ledger, nobody registered."""
    return Ledger.load("-1001", storage, clock=clock)


@pytest.fixture
def ready_ledger(ledger, ana, ben) -> Ledger:
    """Ledger with both participant slots filled."""
    ledger.register(ana)
    ledger.register(ben)
    return ledger


@pytest.fixture
def service(storage, clock) -> LedgerService:
    return LedgerService(storage=storage, clock=clock)
