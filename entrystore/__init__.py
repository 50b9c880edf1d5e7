"""
Entry Store

A per-identity record store. Each identity owns at most one entry
(free-text content plus a completion flag), an optional priority tier and
an optional deadline expressed as a block height.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Immutable records, identities, error codes and the Result type
   - Shared by every layer, depends on nothing

2. VALIDATION (validation.py)
   - Pure parameter checks returning INVALID_PARAMETER errors

3. STORAGE (storage/)
   - Ledger, Priority and Temporal tables keyed by identity
   - Per-identity locks
   - MUST NOT: validate, authorize, or cascade between tables

4. HEIGHT SOURCE (temporal/)
   - Injectable block-height counter with replay support

5. ENGINE (engine.py)
   - Every public operation: existence checks, validation, single-table write

6. OBSERVABILITY (observability/)
   - Bounded operation log and metrics, never entry content

7. API (api/)
   - HTTP adapter supplying the caller identity

CONSTRAINTS ENFORCED:
=====================
- Contract errors are data: every operation returns a Result
- Calls on one identity are serialized; different identities run in parallel
- Priority and temporal records are only written while an entry exists
- Deleting an entry never touches the other two tables
"""

from .contracts import (
    Ack,
    Entry,
    EntryDiagnostics,
    Error,
    ErrorCode,
    Identity,
    PriorityRecord,
    PriorityTier,
    Result,
    TemporalRecord,
)
from .engine import EntryStore, EntryStoreConfig
from .temporal import HeightSource, LogicalHeight

__all__ = [
    'Ack',
    'Entry',
    'EntryDiagnostics',
    'Error',
    'ErrorCode',
    'Identity',
    'PriorityRecord',
    'PriorityTier',
    'Result',
    'TemporalRecord',
    'EntryStore',
    'EntryStoreConfig',
    'HeightSource',
    'LogicalHeight',
]
