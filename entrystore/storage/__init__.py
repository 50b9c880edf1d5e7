"""
Record Storage Layer

RESPONSIBILITY: Keyed storage of the Ledger, Priority and Temporal tables
ALLOWED INPUTS: Identity keys and immutable records
OUTPUTS: Records, or None when a key is absent

WHAT THIS LAYER MUST NOT DO:
============================
- Validate parameters
- Decide whether an operation is allowed
- Cascade a write on one table into another table

BOUNDARY ENFORCEMENT:
=====================
- Stores whole immutable records, never partial updates
- The three tables are uncoupled; removing an entry leaves the
  priority and temporal records of that identity in place
- Per-identity serialization is provided through IdentityLockTable,
  callers decide when to hold it
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional
import threading

from ..contracts.base import Identity
from ..contracts.records import Entry, PriorityRecord, TemporalRecord
from .locks import IdentityLockTable


# =============================================================================
# STORAGE INTERFACES (Dependency Inversion)
# =============================================================================

class StorageBackend:
    """
    Abstract storage backend interface.

    Implementations may use different storage systems while keeping the
    same single-record-replace semantics.
    """

    def get_entry(self, identity: Identity) -> Optional[Entry]:
        raise NotImplementedError

    def put_entry(self, identity: Identity, entry: Entry) -> None:
        raise NotImplementedError

    def remove_entry(self, identity: Identity) -> bool:
        """Remove an entry. Returns False when there was none."""
        raise NotImplementedError

    def get_priority(self, identity: Identity) -> Optional[PriorityRecord]:
        raise NotImplementedError

    def put_priority(self, identity: Identity, record: PriorityRecord) -> None:
        raise NotImplementedError

    def get_temporal(self, identity: Identity) -> Optional[TemporalRecord]:
        raise NotImplementedError

    def put_temporal(self, identity: Identity, record: TemporalRecord) -> None:
        raise NotImplementedError

    def entry_count(self) -> int:
        raise NotImplementedError

    def entry_identities(self) -> List[str]:
        raise NotImplementedError


# =============================================================================
# IN-MEMORY STORAGE BACKEND (Reference Implementation)
# =============================================================================

class InMemoryStorageBackend(StorageBackend):
    """
    In-memory implementation of storage backend.

    Each table is a dict keyed by identity value. A single internal lock
    guards the dict structure so the backend is safe to share between
    threads even without the identity locks.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._ledger: Dict[str, Entry] = {}
        self._priority: Dict[str, PriorityRecord] = {}
        self._temporal: Dict[str, TemporalRecord] = {}

    def get_entry(self, identity: Identity) -> Optional[Entry]:
        with self._lock:
            return self._ledger.get(identity.value)

    def put_entry(self, identity: Identity, entry: Entry) -> None:
        with self._lock:
            self._ledger[identity.value] = entry

    def remove_entry(self, identity: Identity) -> bool:
        with self._lock:
            return self._ledger.pop(identity.value, None) is not None

    def get_priority(self, identity: Identity) -> Optional[PriorityRecord]:
        with self._lock:
            return self._priority.get(identity.value)

    def put_priority(self, identity: Identity, record: PriorityRecord) -> None:
        with self._lock:
            self._priority[identity.value] = record

    def get_temporal(self, identity: Identity) -> Optional[TemporalRecord]:
        with self._lock:
            return self._temporal.get(identity.value)

    def put_temporal(self, identity: Identity, record: TemporalRecord) -> None:
        with self._lock:
            self._temporal[identity.value] = record

    def entry_count(self) -> int:
        with self._lock:
            return len(self._ledger)

    def entry_identities(self) -> List[str]:
        with self._lock:
            return sorted(self._ledger)


# =============================================================================
# STORAGE ENGINE
# =============================================================================

@dataclass
class StorageConfig:
    """Configuration for record storage."""
    backend_type: str = "memory"


class RecordStorageEngine:
    """
    Owns the storage backend and the identity lock table.

    The engine layer above opens `locked(identity)` around each call and
    reads or writes the backend inside it.
    """

    def __init__(self, config: Optional[StorageConfig] = None):
        self._config = config or StorageConfig()
        self._backend = self._create_backend()
        self._locks = IdentityLockTable()

    def _create_backend(self) -> StorageBackend:
        """Create storage backend based on configuration."""
        if self._config.backend_type != "memory":
            raise ValueError(f"Unknown storage backend type: {self._config.backend_type}")
        return InMemoryStorageBackend()

    @contextmanager
    def locked(self, identity: Identity) -> Iterator[StorageBackend]:
        """Hold the identity's lock and yield the backend."""
        with self._locks.hold(identity):
            yield self._backend

    @property
    def backend(self) -> StorageBackend:
        """Access to the underlying storage backend."""
        return self._backend

    @property
    def locks(self) -> IdentityLockTable:
        return self._locks


__all__ = [
    'StorageBackend',
    'InMemoryStorageBackend',
    'StorageConfig',
    'RecordStorageEngine',
    'IdentityLockTable',
]
