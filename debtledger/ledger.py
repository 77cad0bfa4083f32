"""
Ledger Domain Object

A Ledger wraps one stored LedgerDocument and implements every
operation two participants can perform on it. Each operation that
changes the document writes the FULL document back to storage
before returning.

DESIGN DECISION: Two kinds of "no":
- Normal-flow rejections (duplicate registration, full slots, fewer
  than two participants) return None and change nothing.
- Referencing a participant code that is not registered raises
  ParticipantNotFoundError and aborts the operation.

A Ledger is short-lived: load it, run one operation, drop it.
LedgerService takes care of loading it under a per-code lock.
"""

import math
from datetime import datetime
from typing import Callable, Optional

from debtledger.config import get_settings
from debtledger.models.audit import AuditEventBuilder
from debtledger.models.ledger import (
    Entry,
    LedgerDocument,
    Participant,
    Role,
    RunningTotal,
)
from debtledger.services.storage import LedgerStorageInterface


EMPTY_TOTAL_DISPLAY = "💲0.0"


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class ParticipantNotFoundError(LedgerError, LookupError):
    """A referenced participant is not registered in the ledger."""
    pass


def ledger_now() -> datetime:
    """Current time at the configured fixed UTC offset."""
    return datetime.now(get_settings().ledger.tzinfo)


class Ledger:
    """
    A shared ledger between (at most) two participants.

    Readiness: entries and totals only make sense once both
    participant slots are filled, see both_registered().
    """

    def __init__(
        self,
        document: LedgerDocument,
        storage: LedgerStorageInterface,
        audit_logger=None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._document = document
        self._storage = storage
        self._audit_logger = audit_logger
        self._clock = clock or ledger_now

    @classmethod
    def load(
        cls,
        code: str,
        storage: LedgerStorageInterface,
        audit_logger=None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "Ledger":
        """Load (or create) the ledger stored under code."""
        return cls(storage.load(code), storage, audit_logger, clock)

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def code(self) -> str:
        return self._document.code

    @property
    def document(self) -> LedgerDocument:
        return self._document

    @property
    def participants(self) -> tuple[Participant, ...]:
        return tuple(self._document.clients)

    @property
    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._document.amounts)

    @property
    def running_total(self) -> Optional[RunningTotal]:
        return self._document.total

    def both_registered(self) -> bool:
        """True once both participant slots are filled."""
        return len(self._document.clients) >= 2

    def is_registered(self, participant_code: str) -> bool:
        return any(c.code == participant_code for c in self._document.clients)

    def get_participant(self, participant_code: str) -> Participant:
        """
        Find a registered participant by code.

        Raises:
            ParticipantNotFoundError: If no participant has that code
        """
        for client in self._document.clients:
            if client.code == participant_code:
                return client
        raise ParticipantNotFoundError(
            f"Participant {participant_code!r} is not registered in ledger {self.code}"
        )

    def participant_by_role(self, role: Role) -> Participant:
        """
        First registered participant holding a role.

        Raises:
            ParticipantNotFoundError: If nobody holds that role
        """
        for client in self._document.clients:
            if client.role == role:
                return client
        raise ParticipantNotFoundError(
            f"No participant holds role {role} in ledger {self.code}"
        )

    def show_entries(self) -> str:
        return "\n".join(str(entry) for entry in self._document.amounts)

    def show_participants(self) -> str:
        return "\n".join(str(client) for client in self._document.clients)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, participant: Participant) -> Optional[Participant]:
        """
        Add a participant to a free slot.

        Returns the participant, or None if the code is already
        registered or both slots are taken. Rejections do not persist.
        """
        if self.is_registered(participant.code):
            self._audit(AuditEventBuilder.registration_rejected(
                self.code, participant.code, "already registered",
            ))
            return None

        if len(self._document.clients) >= 2:
            self._audit(AuditEventBuilder.registration_rejected(
                self.code, participant.code, "both slots taken",
            ))
            return None

        self._document.clients.append(participant.model_copy())
        self._persist()
        self._audit(AuditEventBuilder.participant_registered(
            self.code, participant.code, participant.name, participant.role.value,
        ))
        return participant

    # -------------------------------------------------------------------------
    # Entries
    # -------------------------------------------------------------------------

    def record_entry(self, value: float, participant_code: str) -> Optional[Entry]:
        """
        Append a signed entry saved by a registered participant.

        Returns None (and persists nothing) until both participants
        are registered.

        Raises:
            ParticipantNotFoundError: If participant_code is unknown
            ValueError: If value is not a finite number
        """
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Entry value must be finite, got {value}")

        if not self.both_registered():
            self._audit(AuditEventBuilder.entry_rejected(
                self.code, participant_code, value,
            ))
            return None

        participant = self.get_participant(participant_code)
        entry = Entry.create(value, participant, self._clock())

        self._document.amounts.append(entry)
        self._persist()
        self._audit(AuditEventBuilder.entry_recorded(
            self.code, participant_code, value,
        ))
        return entry

    def pop_last(self, participant_code: str) -> Optional[Entry]:
        """
        Remove the most recent entry and take it out of the total.

        The total becomes previous_total - removed_value, stamped with
        the requester and now. Returns the removed entry or None.
        """
        participant = self.get_participant(participant_code)
        now = self._clock()
        amounts = self._document.amounts
        removed = amounts.pop() if amounts else None

        # FIXME: an empty pop still rewrites the total (0 - 0 when no
        # total exists) and moves its timestamp forward. Candidate defect.
        previous_value = self._document.total.value if self._document.total else 0.0
        removed_value = removed.value if removed else 0.0
        new_total = previous_value - removed_value

        self._document.total = Entry.create(new_total, participant, now)
        self._persist()
        self._audit(AuditEventBuilder.entry_popped(
            self.code,
            participant_code,
            removed.value if removed else None,
            new_total,
        ))
        return removed

    # -------------------------------------------------------------------------
    # Reset and restore
    # -------------------------------------------------------------------------

    def reset_amounts(self, participant_code: str) -> RunningTotal:
        """Clear all entries and zero the total. Participants stay."""
        participant = self.get_participant(participant_code)
        now = self._clock()
        cleared = len(self._document.amounts)

        self._document.amounts = []
        self._document.total = Entry.create(0.0, participant, now)
        self._persist()
        self._audit(AuditEventBuilder.amounts_reset(
            self.code, participant_code, cleared,
        ))
        return self._document.total

    def restore(self) -> None:
        """
        Factory reset: no participants, no entries, zero total.

        The stored record is kept, only its contents are cleared.
        """
        now = self._clock()
        self._document.clients = []
        self._document.amounts = []
        self._document.total = Entry.create(0.0, Participant.placeholder(), now)
        self._persist()
        self._audit(AuditEventBuilder.ledger_restored(self.code))

    # -------------------------------------------------------------------------
    # Totals and history
    # -------------------------------------------------------------------------

    def compute_total(self, participant_code: str) -> RunningTotal:
        """
        Recompute the running total.

        Without a previous total every entry is summed. Otherwise only
        entries created strictly after the previous total are added to
        it. A total of exactly 0.0 clears the entries via reset_amounts.
        """
        participant = self.get_participant(participant_code)
        now = self._clock()
        previous = self._document.total

        if previous is None:
            value = sum((entry.value for entry in self._document.amounts), 0.0)
        else:
            pending = [
                entry.value
                for entry in self._document.amounts
                if entry.created_at > previous.created_at
            ]
            value = sum(pending, 0.0) + previous.value

        self._document.total = Entry.create(value, participant, now)
        self._audit(AuditEventBuilder.total_computed(
            self.code, participant_code, value, incremental=previous is not None,
        ))

        if value == 0.0:
            self.reset_amounts(participant_code)

        self._persist()
        return self._document.total

    def history(self, participant_code: str) -> str:
        """
        Entries as of now, followed by a freshly computed total.

        NOTE: Not a pure read. The total is recomputed and persisted,
        which may also clear the entries when it nets to zero.
        """
        lines = [str(entry) for entry in self._document.amounts]

        self.compute_total(participant_code)

        total = self._document.total
        total_display = str(total) if total is not None else EMPTY_TOTAL_DISPLAY
        self._persist()
        self._audit(AuditEventBuilder.history_viewed(
            self.code, participant_code, len(lines),
        ))

        return "\n".join(lines) + "\nTotal:\n" + total_display

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _persist(self) -> None:
        self._storage.save(self._document)

    def _audit(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)
