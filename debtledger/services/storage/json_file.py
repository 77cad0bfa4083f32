"""
JSON File Storage Implementation

DESIGN DECISION: Each ledger is a pretty-printed JSON document in
its own file, named after the ledger code. Users (or an admin) can
open the file and read it directly.

TRADEOFFS:
- A save truncates and rewrites the whole file. A crash mid-write
  can leave a corrupt record, which the next load reports as a
  LedgerFormatError instead of guessing.
- No cross-process locking. In-process writers are serialized by
  LedgerService.
"""

from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError

from debtledger.config import get_settings
from debtledger.models.audit import AuditEventBuilder
from debtledger.models.ledger import LedgerDocument
from debtledger.services.storage.interface import (
    LedgerFormatError,
    LedgerIOError,
    LedgerStorageInterface,
)


logger = structlog.get_logger(__name__)


class JsonFileLedgerStorage(LedgerStorageInterface):
    """
    File-backed ledger storage, one `<code>.json` per ledger.

    The data directory is created on first load.
    """

    def __init__(
        self,
        data_dir: Optional[str] = None,
        audit_logger=None,
    ):
        self._data_dir = Path(data_dir or get_settings().ledger.data_dir)
        self._audit_logger = audit_logger

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, code: str) -> Path:
        """File holding the ledger with this code."""
        if not code or "/" in code or "\\" in code or code in (".", ".."):
            raise ValueError(f"Invalid ledger code: {code!r}")
        return self._data_dir / f"{code}.json"

    def exists(self, code: str) -> bool:
        return self.path_for(code).is_file()

    def load(self, code: str) -> LedgerDocument:
        """Load a ledger, creating an empty one on first access."""
        path = self.path_for(code)

        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LedgerIOError(f"Cannot create data directory {self._data_dir}: {e}") from e

        if not path.exists():
            document = LedgerDocument.empty(code)
            self._write(path, document)
            logger.info("ledger_created", ledger_code=code, path=str(path))
            if self._audit_logger:
                self._audit_logger.log(
                    AuditEventBuilder.ledger_created(code, str(path))
                )
            return document

        try:
            raw = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise LedgerFormatError(f"Ledger {code} is not UTF-8 text: {e}") from e
        except OSError as e:
            raise LedgerIOError(f"Cannot read ledger {code}: {e}") from e

        try:
            document = LedgerDocument.from_json(raw)
        except ValidationError as e:
            raise LedgerFormatError(f"Ledger {code} is not valid: {e}") from e

        # The file name is the source of truth for the code
        if document.code != code:
            document = document.model_copy(update={"code": code})

        return document

    def save(self, document: LedgerDocument) -> None:
        """Overwrite the ledger's file with the full document."""
        self._write(self.path_for(document.code), document)
        if self._audit_logger:
            self._audit_logger.log(
                AuditEventBuilder.ledger_saved(
                    document.code,
                    participants=len(document.clients),
                    entries=len(document.amounts),
                )
            )

    def _write(self, path: Path, document: LedgerDocument) -> None:
        try:
            path.write_text(document.to_json(), encoding="utf-8")
        except OSError as e:
            raise LedgerIOError(f"Cannot write ledger {document.code}: {e}") from e
