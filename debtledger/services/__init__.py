"""Services package."""

from debtledger.services.storage import (
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerFormatError,
    LedgerIOError,
    LedgerStorageInterface,
    StorageError,
)

__all__ = [
    # Storage services
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
    "LedgerFormatError",
    "LedgerIOError",
    "LedgerStorageInterface",
    "StorageError",
]
