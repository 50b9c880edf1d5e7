"""
Contracts shared by every layer of the entry store.

Layers import types from here and never from each other's implementations.
"""

from .base import ErrorCode, Error, Result, Identity, Timestamp
from .records import (
    Entry, PriorityTier, PriorityRecord, TemporalRecord, EntryDiagnostics, Ack
)
from .events import AuditEventType, AuditLogEntry, MetricPoint

__all__ = [
    'ErrorCode',
    'Error',
    'Result',
    'Identity',
    'Timestamp',
    'Entry',
    'PriorityTier',
    'PriorityRecord',
    'TemporalRecord',
    'EntryDiagnostics',
    'Ack',
    'AuditEventType',
    'AuditLogEntry',
    'MetricPoint',
]
