"""
Entry Store Orchestration Module

Unified interface for every operation of the entry store.

DESIGN PRINCIPLES:
==================
1. Every call resolves its identity, takes that identity's lock, looks up
   the ledger entry, validates inputs, then writes at most one table
2. Contract failures come back as Result.failure, never as exceptions
3. Priority and temporal records are only written while an entry exists;
   deleting an entry does not cascade into them
4. Every call is recorded by the observability layer
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional
import logging
import os

from .contracts.base import Error, ErrorCode, Identity, Result
from .contracts.events import AuditEventType
from .contracts.records import (
    Ack, Entry, EntryDiagnostics, PriorityRecord, PriorityTier, TemporalRecord
)
from .observability import ObservabilityConfig, ObservabilityEngine
from .storage import RecordStorageEngine, StorageBackend, StorageConfig
from .temporal.clock import HeightSource, LogicalHeight
from .validation import (
    MAX_CONTENT_BYTES, validate_content, validate_duration, validate_tier
)


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class EntryStoreConfig:
    """Unified configuration for the entry store."""
    max_content_bytes: int = MAX_CONTENT_BYTES
    initial_height: int = 0
    storage: StorageConfig = None
    observability: ObservabilityConfig = None

    def __post_init__(self):
        self.storage = self.storage or StorageConfig()
        self.observability = self.observability or ObservabilityConfig()
        if self.max_content_bytes <= 0:
            raise ValueError("max_content_bytes must be positive")

    @classmethod
    def from_env(cls) -> 'EntryStoreConfig':
        """Build configuration from ENTRYSTORE_* environment variables."""
        enable_metrics = os.environ.get("ENTRYSTORE_ENABLE_METRICS", "1")
        return cls(
            max_content_bytes=int(os.environ.get("ENTRYSTORE_MAX_CONTENT_BYTES", MAX_CONTENT_BYTES)),
            initial_height=int(os.environ.get("ENTRYSTORE_INITIAL_HEIGHT", 0)),
            observability=ObservabilityConfig(
                enable_metrics=enable_metrics.lower() not in ("0", "false", "no"),
                oplog_capacity=int(os.environ.get("ENTRYSTORE_OPLOG_CAPACITY", 10_000)),
            ),
        )


def _not_found(identity: Identity) -> Error:
    return Error.create(
        ErrorCode.ENTRY_NOT_FOUND,
        f"No entry exists for {identity.value}"
    ).with_context("identity", identity.value)


def _duplicate(identity: Identity) -> Error:
    return Error.create(
        ErrorCode.DUPLICATE_ENTRY,
        f"An entry already exists for {identity.value}"
    ).with_context("identity", identity.value)


# =============================================================================
# ENTRY STORE
# =============================================================================

class EntryStore:
    """
    Per-identity record store.

    TABLES:
    =======
    - Ledger:   identity -> Entry (content, completed)
    - Priority: identity -> PriorityRecord (tier 1..3)
    - Temporal: identity -> TemporalRecord (deadline height, notified)

    LIFECYCLE (ledger, per identity):
    =================================
    Absent  --create/delegate-->  Present(completed=False)
    Present --update-->           Present (content/completed replaced)
    Present --delete-->           Absent

    The caller identity is always an explicit argument, supplied by the
    transport layer. Only delegate_entry acts on a different identity.
    """

    def __init__(
        self,
        config: Optional[EntryStoreConfig] = None,
        height_source: Optional[HeightSource] = None
    ):
        self._config = config or EntryStoreConfig()
        self._storage = RecordStorageEngine(self._config.storage)
        self._observability = ObservabilityEngine(self._config.observability)
        self._height = height_source or LogicalHeight.live(self._config.initial_height)

    # =========================================================================
    # CALL DISCIPLINE
    # =========================================================================

    def _run(
        self,
        action: str,
        identity: Identity,
        event_type: AuditEventType,
        operation: Callable[[StorageBackend], Result]
    ) -> Result:
        """Run `operation` under the identity's lock and record the outcome."""
        with self._storage.locked(identity) as tables:
            result = operation(tables)

        self._observability.record_operation(
            action=action,
            identity=identity.value,
            event_type=event_type,
            error_code=result.code
        )
        return result

    # =========================================================================
    # LEDGER OPERATIONS
    # =========================================================================

    def create_entry(self, caller: Identity, content: str) -> Result:
        """Create the caller's entry with completed=False."""
        return self._insert("create_entry", caller, content)

    def delegate_entry(self, target: Identity, content: str) -> Result:
        """
        Create an entry for `target` on behalf of the caller.

        Any caller may delegate to any target that has no entry yet.
        """
        return self._insert("delegate_entry", target, content)

    def _insert(self, action: str, identity: Identity, content: str) -> Result:
        def operation(tables: StorageBackend) -> Result:
            if tables.get_entry(identity) is not None:
                return Result.failure(_duplicate(identity))

            error = validate_content(content, self._config.max_content_bytes)
            if error:
                return Result.failure(error)

            tables.put_entry(identity, Entry(content=content, completed=False))
            self._observability.adjust_entries_present(1)
            logger.info("%s: entry created for %s", action, identity.value)
            return Result.success(Ack(identity=identity.value, operation=action))

        return self._run(action, identity, AuditEventType.MUTATION, operation)

    def update_entry(self, caller: Identity, content: str, completed: bool) -> Result:
        """Replace content and completed of the caller's entry as one record."""
        def operation(tables: StorageBackend) -> Result:
            if tables.get_entry(caller) is None:
                return Result.failure(_not_found(caller))

            error = validate_content(content, self._config.max_content_bytes)
            if error:
                return Result.failure(error)

            tables.put_entry(caller, Entry(content=content, completed=completed))
            return Result.success(Ack(identity=caller.value, operation="update_entry"))

        return self._run("update_entry", caller, AuditEventType.MUTATION, operation)

    def delete_entry(self, caller: Identity) -> Result:
        """
        Remove the caller's ledger entry.

        Priority and temporal records of the caller are left in place.
        """
        def operation(tables: StorageBackend) -> Result:
            if not tables.remove_entry(caller):
                return Result.failure(_not_found(caller))
            self._observability.adjust_entries_present(-1)
            logger.info("delete_entry: entry removed for %s", caller.value)
            return Result.success(Ack(identity=caller.value, operation="delete_entry"))

        return self._run("delete_entry", caller, AuditEventType.MUTATION, operation)

    # =========================================================================
    # PRIORITY AND TEMPORAL SUB-OPERATIONS
    # =========================================================================

    def assign_priority(self, caller: Identity, tier: int) -> Result:
        """Set the caller's priority tier (1 low, 2 medium, 3 high)."""
        def operation(tables: StorageBackend) -> Result:
            if tables.get_entry(caller) is None:
                return Result.failure(_not_found(caller))

            error = validate_tier(tier)
            if error:
                return Result.failure(error)

            record = PriorityRecord(tier=PriorityTier(tier))
            tables.put_priority(caller, record)
            return Result.success(record)

        return self._run("assign_priority", caller, AuditEventType.MUTATION, operation)

    def configure_deadline(self, caller: Identity, duration_blocks: int) -> Result:
        """
        Set the caller's deadline to current height + duration_blocks.

        The height is read while the caller's lock is held. Reconfiguring
        resets notified to False.
        """
        def operation(tables: StorageBackend) -> Result:
            if tables.get_entry(caller) is None:
                return Result.failure(_not_found(caller))

            error = validate_duration(duration_blocks)
            if error:
                return Result.failure(error)

            height = self._height.current_height()
            record = TemporalRecord(deadline=height + duration_blocks, notified=False)
            tables.put_temporal(caller, record)
            return Result.success(record)

        return self._run("configure_deadline", caller, AuditEventType.MUTATION, operation)

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def fetch_entry(self, caller: Identity) -> Result:
        def operation(tables: StorageBackend) -> Result:
            entry = tables.get_entry(caller)
            if entry is None:
                return Result.failure(_not_found(caller))
            return Result.success(entry)

        return self._run("fetch_entry", caller, AuditEventType.QUERY, operation)

    def check_completion(self, caller: Identity) -> Result:
        def operation(tables: StorageBackend) -> Result:
            entry = tables.get_entry(caller)
            if entry is None:
                return Result.failure(_not_found(caller))
            return Result.success(entry.completed)

        return self._run("check_completion", caller, AuditEventType.QUERY, operation)

    def diagnostics(self, caller: Identity) -> Result:
        """
        Introspect the caller's entry. Never fails: a missing entry yields
        exists=False, content_length=0, completed=False.
        """
        def operation(tables: StorageBackend) -> Result:
            entry = tables.get_entry(caller)
            if entry is None:
                return Result.success(EntryDiagnostics.absent())
            return Result.success(EntryDiagnostics.of(entry))

        return self._run("diagnostics", caller, AuditEventType.QUERY, operation)

    def fetch_priority(self, caller: Identity) -> Result:
        """Priority record of the caller, or None when unclassified."""
        def operation(tables: StorageBackend) -> Result:
            if tables.get_entry(caller) is None:
                return Result.failure(_not_found(caller))
            return Result.success(tables.get_priority(caller))

        return self._run("fetch_priority", caller, AuditEventType.QUERY, operation)

    def fetch_deadline(self, caller: Identity) -> Result:
        """Temporal record of the caller, or None when no deadline is set."""
        def operation(tables: StorageBackend) -> Result:
            if tables.get_entry(caller) is None:
                return Result.failure(_not_found(caller))
            return Result.success(tables.get_temporal(caller))

        return self._run("fetch_deadline", caller, AuditEventType.QUERY, operation)

    # =========================================================================
    # OBSERVABILITY INTERFACE
    # =========================================================================

    @property
    def config(self) -> EntryStoreConfig:
        return self._config

    @property
    def observability(self) -> ObservabilityEngine:
        return self._observability

    @property
    def height_source(self) -> HeightSource:
        return self._height

    def entry_count(self) -> int:
        return self._storage.backend.entry_count()
