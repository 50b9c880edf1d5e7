"""
Record Contracts

Immutable records held by the three tables of the entry store:

- Ledger Table:   Identity -> Entry
- Priority Table: Identity -> PriorityRecord
- Temporal Table: Identity -> TemporalRecord

Writes replace a whole record; nothing is merged field by field.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum


@dataclass(frozen=True)
class Entry:
    """Primary per-identity record."""
    content: str
    completed: bool = False

    @property
    def content_length(self) -> int:
        """Length of the content in UTF-8 bytes."""
        return len(self.content.encode('utf-8'))


class PriorityTier(IntEnum):
    """Priority classification, 1 (low) to 3 (high)."""
    LOW = 1
    MEDIUM = 2
    HIGH = 3


@dataclass(frozen=True)
class PriorityRecord:
    tier: PriorityTier


@dataclass(frozen=True)
class TemporalRecord:
    """
    Deadline as an absolute height.

    Computed once when configured; never recomputed on read.
    """
    deadline: int
    notified: bool = False


@dataclass(frozen=True)
class EntryDiagnostics:
    """Introspection view of an identity's ledger entry."""
    exists: bool
    content_length: int
    completed: bool

    @staticmethod
    def absent() -> EntryDiagnostics:
        return EntryDiagnostics(exists=False, content_length=0, completed=False)

    @staticmethod
    def of(entry: Entry) -> EntryDiagnostics:
        return EntryDiagnostics(
            exists=True,
            content_length=entry.content_length,
            completed=entry.completed
        )


@dataclass(frozen=True)
class Ack:
    """Success marker returned by mutating operations."""
    identity: str
    operation: str
