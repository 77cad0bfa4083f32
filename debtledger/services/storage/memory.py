"""
In-Memory Storage Implementation

Keeps serialized documents in a dict. Documents go through the same
JSON round trip as on disk, so a loaded ledger never shares state
with a previously saved one.
"""

from pydantic import ValidationError

from debtledger.models.ledger import LedgerDocument
from debtledger.services.storage.interface import (
    LedgerFormatError,
    LedgerStorageInterface,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Dict-backed ledger storage for tests and dry runs."""

    def __init__(self):
        self._records: dict[str, str] = {}
        self.save_count = 0

    def load(self, code: str) -> LedgerDocument:
        if code not in self._records:
            document = LedgerDocument.empty(code)
            self._records[code] = document.to_json()
            return document

        try:
            return LedgerDocument.from_json(self._records[code])
        except ValidationError as e:
            raise LedgerFormatError(f"Ledger {code} is not valid: {e}") from e

    def save(self, document: LedgerDocument) -> None:
        self._records[document.code] = document.to_json()
        self.save_count += 1

    def exists(self, code: str) -> bool:
        return code in self._records

    def raw(self, code: str) -> str:
        """Stored JSON for a code (KeyError if never stored)."""
        return self._records[code]

    def put_raw(self, code: str, raw: str) -> None:
        """Store raw content as-is, bypassing validation."""
        self._records[code] = raw
