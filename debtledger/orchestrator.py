"""
Main Orchestrator for Debts With Friends

This module ties together storage, the ledger domain object and the
command dispatcher.

DESIGN DECISION: Every operation is one load → mutate → save cycle
run under a lock keyed by ledger code. Two commands for the same
ledger arriving on different threads run one after the other, so
neither overwrites the other's update. Different ledgers never wait
on each other.
"""

import threading
import weakref
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, Optional, TypeVar

from debtledger.audit import AuditLogger
from debtledger.commands import CommandDispatcher
from debtledger.ledger import Ledger
from debtledger.services.storage import (
    JsonFileLedgerStorage,
    LedgerStorageInterface,
)


T = TypeVar("T")


class LedgerService:
    """
    Opens ledgers and runs operations on them one at a time per code.

    Usage:
        total = service.run(chat_id, lambda ledger: ledger.compute_total(user_id))

        with service.open(chat_id) as ledger:
            ledger.register(participant)
    """

    def __init__(
        self,
        storage: Optional[LedgerStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._storage = storage or JsonFileLedgerStorage(audit_logger=audit_logger)
        self._audit_logger = audit_logger
        self._clock = clock
        # A lock lives only while some caller holds it
        self._locks: "weakref.WeakValueDictionary[str, threading.Lock]" = (
            weakref.WeakValueDictionary()
        )
        self._locks_guard = threading.Lock()

    @property
    def storage(self) -> LedgerStorageInterface:
        return self._storage

    def _lock_for(self, code: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(code)
            if lock is None:
                lock = threading.Lock()
                self._locks[code] = lock
            return lock

    @contextmanager
    def open(self, code: str) -> Iterator[Ledger]:
        """
        Load a fresh Ledger and hold the code's lock while it is used.

        The Ledger must not be kept past the with block.
        """
        lock = self._lock_for(code)
        with lock:
            yield Ledger.load(
                code,
                self._storage,
                audit_logger=self._audit_logger,
                clock=self._clock,
            )

    def run(self, code: str, operation: Callable[[Ledger], T]) -> T:
        """Run one operation against a freshly loaded ledger."""
        with self.open(code) as ledger:
            return operation(ledger)


def create_app_components(
    data_dir: Optional[str] = None,
    storage: Optional[LedgerStorageInterface] = None,
) -> tuple[LedgerService, CommandDispatcher, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        data_dir: Directory for JSON ledgers (defaults to settings)
        storage: Explicit storage backend, overrides data_dir

    Returns:
        (ledger_service, command_dispatcher, audit_logger)
    """
    audit_logger = AuditLogger()
    storage = storage or JsonFileLedgerStorage(data_dir, audit_logger=audit_logger)

    service = LedgerService(storage=storage, audit_logger=audit_logger)
    dispatcher = CommandDispatcher(service, audit_logger=audit_logger)

    return service, dispatcher, audit_logger
