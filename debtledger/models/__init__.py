"""
Data Models Package

This package contains all Pydantic models used by Debts With Friends.
Stored ledgers and audit events must conform to these schemas.
"""

from debtledger.models.ledger import (
    Entry,
    LedgerDocument,
    Participant,
    Role,
    RunningTotal,
    format_value,
)
from debtledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Entry",
    "LedgerDocument",
    "Participant",
    "Role",
    "RunningTotal",
    "format_value",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
