"""
Audit Models for Debts With Friends

Every ledger operation produces an audit event, including the
ones that were rejected. This gives:
1. Traceability of who changed a shared ledger and when
2. Debugging information when a stored document looks wrong
3. A record of rejected commands (not errors, but worth seeing)

DESIGN DECISION: Audit events are only ever emitted, never edited.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Storage
    LEDGER_CREATED = "ledger_created"
    LEDGER_SAVED = "ledger_saved"

    # Registration
    PARTICIPANT_REGISTERED = "participant_registered"
    REGISTRATION_REJECTED = "registration_rejected"

    # Entries
    ENTRY_RECORDED = "entry_recorded"
    ENTRY_REJECTED = "entry_rejected"
    ENTRY_POPPED = "entry_popped"

    # Totals and history
    TOTAL_COMPUTED = "total_computed"
    HISTORY_VIEWED = "history_viewed"

    # Destructive operations
    AMOUNTS_RESET = "amounts_reset"
    LEDGER_RESTORED = "ledger_restored"

    # Commands
    COMMAND_RECEIVED = "command_received"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Ledger and participant codes are plain strings since both are
    opaque chat identifiers.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context
    ledger_code: Optional[str] = Field(
        default=None,
        description="Ledger the event relates to"
    )
    participant_code: Optional[str] = Field(
        default=None,
        description="Participant who triggered the event"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "ledger_code": self.ledger_code,
            "participant_code": self.participant_code,
            "description": self.description,
            "details": self.details,
            "error_type": self.error_type,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_recorded(code, participant_code, 50.0)
        event = AuditEventBuilder.total_computed(code, participant_code, 30.0, incremental=True)
    """

    @staticmethod
    def ledger_created(ledger_code: str, location: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_CREATED,
            ledger_code=ledger_code,
            description=f"Empty ledger created at {location}",
            details={"location": location},
        )

    @staticmethod
    def ledger_saved(
        ledger_code: str,
        participants: int,
        entries: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_SAVED,
            severity=AuditSeverity.DEBUG,
            ledger_code=ledger_code,
            description="Ledger persisted",
            details={
                "participants": participants,
                "entries": entries,
            },
        )

    @staticmethod
    def participant_registered(
        ledger_code: str,
        participant_code: str,
        name: str,
        role: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PARTICIPANT_REGISTERED,
            ledger_code=ledger_code,
            participant_code=participant_code,
            description=f"Participant registered: {name} as {role}",
            details={"name": name, "role": role},
        )

    @staticmethod
    def registration_rejected(
        ledger_code: str,
        participant_code: str,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            ledger_code=ledger_code,
            participant_code=participant_code,
            description=f"Registration rejected: {reason}",
            details={"reason": reason},
        )

    @staticmethod
    def entry_recorded(
        ledger_code: str,
        participant_code: str,
        value: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_RECORDED,
            ledger_code=ledger_code,
            participant_code=participant_code,
            description=f"Entry recorded: {value}",
            details={"value": value},
        )

    @staticmethod
    def entry_rejected(
        ledger_code: str,
        participant_code: str,
        value: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_REJECTED,
            severity=AuditSeverity.WARNING,
            ledger_code=ledger_code,
            participant_code=participant_code,
            description="Entry rejected: both participants must be registered",
            details={"value": value},
        )

    @staticmethod
    def entry_popped(
        ledger_code: str,
        participant_code: str,
        removed: Optional[float],
        new_total: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_POPPED,
            ledger_code=ledger_code,
            participant_code=participant_code,
            description=(
                f"Entry removed: {removed}" if removed is not None
                else "Pop requested on empty ledger"
            ),
            details={"removed": removed, "new_total": new_total},
        )

    @staticmethod
    def total_computed(
        ledger_code: str,
        participant_code: str,
        value: float,
        incremental: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TOTAL_COMPUTED,
            ledger_code=ledger_code,
            participant_code=participant_code,
            description=f"Total computed: {value}",
            details={"value": value, "incremental": incremental},
        )

    @staticmethod
    def history_viewed(ledger_code: str, participant_code: str, entries: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HISTORY_VIEWED,
            ledger_code=ledger_code,
            participant_code=participant_code,
            description=f"History requested ({entries} entries)",
            details={"entries": entries},
        )

    @staticmethod
    def amounts_reset(ledger_code: str, participant_code: str, cleared: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AMOUNTS_RESET,
            severity=AuditSeverity.WARNING,
            ledger_code=ledger_code,
            participant_code=participant_code,
            description=f"Amounts reset ({cleared} entries cleared)",
            details={"cleared": cleared},
        )

    @staticmethod
    def ledger_restored(ledger_code: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_RESTORED,
            severity=AuditSeverity.WARNING,
            ledger_code=ledger_code,
            description="Ledger restored to defaults",
        )

    @staticmethod
    def command_received(
        ledger_code: str,
        participant_code: str,
        command: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_RECEIVED,
            severity=AuditSeverity.DEBUG,
            ledger_code=ledger_code,
            participant_code=participant_code,
            description=f"Command received: /{command[:64]}",
            details={"command": command},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        ledger_code: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            ledger_code=ledger_code,
            description=f"System error: {error_type}",
            error_type=error_type,
            error_message=error_message,
            details=details or {},
        )

    @staticmethod
    def external_service_error(service: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={"service": service},
        )
