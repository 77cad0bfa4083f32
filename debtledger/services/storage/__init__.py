"""
Storage Services Package

Provides the abstract ledger storage interface and its implementations:
JSON files on disk for the bot and an in-memory store for tests.
"""

from debtledger.services.storage.interface import (
    LedgerFormatError,
    LedgerIOError,
    LedgerStorageInterface,
    StorageError,
)
from debtledger.services.storage.json_file import JsonFileLedgerStorage
from debtledger.services.storage.memory import InMemoryLedgerStorage

__all__ = [
    # Interface
    "LedgerStorageInterface",
    # Exceptions
    "LedgerFormatError",
    "LedgerIOError",
    "StorageError",
    # Implementations
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
]
