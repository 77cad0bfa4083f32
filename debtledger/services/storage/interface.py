"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for ledger storage.
This allows us to:
1. Keep JSON files on disk for the bot
2. Use in-memory storage for testing
3. Keep ledger logic decoupled from where documents live

The interface is intentionally tiny: a ledger is always read and
written as one whole document.
"""

from abc import ABC, abstractmethod

from debtledger.models.ledger import LedgerDocument


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger document storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self, code: str) -> LedgerDocument:
        """
        Load the ledger stored under a code, creating it if missing.

        A missing ledger is synthesized empty, written, and returned.

        Args:
            code: The ledger identifier

        Returns:
            The stored (or freshly created) document

        Raises:
            LedgerIOError: If storage cannot be read or written
            LedgerFormatError: If stored content is not a ledger
        """
        pass

    @abstractmethod
    def save(self, document: LedgerDocument) -> None:
        """
        Overwrite the stored ledger with the full document.

        Args:
            document: The ledger to persist under its own code

        Raises:
            LedgerIOError: If storage cannot be written
        """
        pass

    @abstractmethod
    def exists(self, code: str) -> bool:
        """
        Check whether a ledger has been stored under a code.

        Args:
            code: The ledger identifier

        Returns:
            True if a record exists
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class LedgerIOError(StorageError):
    """Storage could not be read or written."""
    pass


class LedgerFormatError(StorageError):
    """Stored content is not a valid ledger document."""
    pass
