"""
Observability Contracts

Immutable entries produced by the store for the observability layer.
Record content is never carried here.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .base import Timestamp


class AuditEventType(Enum):
    """Explicit audit event types."""
    MUTATION = "mutation"
    QUERY = "query"
    REJECTION = "rejection"
    SYSTEM = "system"


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable operation log entry."""
    entry_id: str
    event_type: AuditEventType
    timestamp: Timestamp
    layer: str
    action: str
    identity: Optional[str] = None
    outcome: str = "success"
    metadata: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MetricPoint:
    """Immutable metric data point."""
    metric_name: str
    value: float
    timestamp: Timestamp
    labels: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
