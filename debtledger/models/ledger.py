"""
Core Data Models for Debts With Friends

These models define the persisted shape of a ledger ("plan") shared by
two participants. They are designed to:
1. Round-trip exactly through the JSON document stored per ledger
2. Be immutable where history must not change (participants, entries)
3. Reject malformed documents loudly instead of guessing

DESIGN DECISION: Entries carry a COPY of the participant who saved them.
Re-registering someone later never rewrites historical entries.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS
# =============================================================================

class Role(str, Enum):
    """
    Which command a participant is expected to use.

    NOTE: Not exclusive. Two participants may hold the same role,
    registration only limits the number of slots.
    """
    ADDER = "Adder"
    SUBTRACTOR = "Subtractor"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> Optional["Role"]:
        """Case-insensitive lookup, None for anything else."""
        lowered = text.strip().lower()
        for role in cls:
            if role.value.lower() == lowered:
                return role
        return None


# =============================================================================
# PARTICIPANTS AND ENTRIES
# =============================================================================

class Participant(BaseModel):
    """
    One of the (at most) two registered users of a ledger.

    Identity is the code (e.g. the chat user id). Name and role are
    only ever set through registration.
    """
    model_config = ConfigDict(frozen=True)

    code: str = Field(
        ...,
        description="Stable opaque identifier"
    )
    name: str = Field(
        ...,
        description="Display name at registration time"
    )
    role: Role = Field(
        default=Role.ADDER,
        description="Registered role"
    )

    @classmethod
    def placeholder(cls) -> "Participant":
        """Empty participant used when nobody is left to attribute."""
        return cls(code="", name="", role=Role.ADDER)

    def __str__(self) -> str:
        return f"{self.name} | {self.role}"


def format_value(value: float) -> str:
    """Render integral floats without a trailing '.0'."""
    if value.is_integer():
        return str(int(value))
    return str(value)


class Entry(BaseModel):
    """
    A single signed monetary record.

    The same shape doubles as the running total: value is the
    aggregate, saved_by is who computed it and created_at is the
    boundary used for incremental recomputation.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: float = Field(
        ...,
        description="Signed amount; positive adds, negative subtracts"
    )
    saved_by: Participant = Field(
        ...,
        alias="savedBy",
        description="Snapshot of the participant who saved it"
    )
    created_at: AwareDatetime = Field(
        ...,
        alias="createdAt",
        description="Fixed-offset timestamp"
    )

    @classmethod
    def create(
        cls,
        value: float,
        saved_by: Participant,
        created_at: datetime,
    ) -> "Entry":
        """Build an entry holding its own copy of the participant."""
        return cls(
            value=value,
            saved_by=saved_by.model_copy(),
            created_at=created_at,
        )

    def __str__(self) -> str:
        return (
            f"💲{format_value(self.value)}, "
            f"🗓️{self.created_at.strftime('%d %m %y')}, "
            f"🥷{self.saved_by}"
        )


# The running total is stored with exactly the entry shape
RunningTotal = Entry


# =============================================================================
# LEDGER DOCUMENT
# =============================================================================

class LedgerDocument(BaseModel):
    """
    The persisted ledger, one JSON document per code.

    Field names match the stored keys: code, clients, amounts, total.
    """
    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(
        ...,
        description="Ledger identifier, also the storage key"
    )
    clients: list[Participant] = Field(
        default_factory=list,
        max_length=2,
        description="Registered participants (at most two)"
    )
    amounts: list[Entry] = Field(
        default_factory=list,
        description="Entries in insertion order"
    )
    total: Optional[RunningTotal] = Field(
        default=None,
        description="Last computed running total"
    )

    @field_validator('clients')
    @classmethod
    def unique_client_codes(cls, v: list[Participant]) -> list[Participant]:
        """A participant code may only appear once."""
        codes = [client.code for client in v]
        if len(codes) != len(set(codes)):
            raise ValueError("Duplicate participant code in ledger")
        return v

    @classmethod
    def empty(cls, code: str) -> "LedgerDocument":
        """Default document synthesized on first access."""
        return cls(code=code, clients=[], amounts=[], total=None)

    def to_json(self) -> str:
        """Serialize with the stored (camelCase) keys."""
        return self.model_dump_json(by_alias=True, indent=2)

    @classmethod
    def from_json(cls, raw: str) -> "LedgerDocument":
        """Parse a stored document. Raises pydantic.ValidationError."""
        return cls.model_validate_json(raw)
