"""
Observability Layer

RESPONSIBILITY: Operation log and metrics for every store call
ALLOWED INPUTS: Action names, identities, outcomes and error codes
OUTPUTS: AuditLogEntry lists, MetricPoint series, summary reports

WHAT THIS LAYER MUST NOT DO:
============================
- Modify system behavior
- Record entry content
- Keep unbounded history (the operation log is a bounded trace,
  not a record history)
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional, Tuple
import hashlib
import logging
import threading

from ..contracts.base import ErrorCode, Timestamp
from ..contracts.events import AuditEventType, AuditLogEntry, MetricPoint


logger = logging.getLogger(__name__)


# =============================================================================
# LOG COLLECTOR
# =============================================================================

class LogCollector:
    """
    Bounded, append-only collector for one layer's operation log.

    When full, the oldest entries are dropped.
    """

    def __init__(self, layer_name: str, capacity: int):
        self._layer_name = layer_name
        self._entries: Deque[AuditLogEntry] = deque(maxlen=capacity)
        self._sequence: int = 0
        self._lock = threading.Lock()

    def collect(self, make_entry: Callable[[int], AuditLogEntry]) -> AuditLogEntry:
        """Build the entry for the next sequence number and append it."""
        with self._lock:
            self._sequence += 1
            entry = make_entry(self._sequence)
            self._entries.append(entry)
            return entry

    def get_entries(
        self,
        action: Optional[str] = None,
        identity: Optional[str] = None,
        event_type: Optional[AuditEventType] = None
    ) -> List[AuditLogEntry]:
        """Get entries, optionally filtered."""
        with self._lock:
            entries = list(self._entries)

        if action:
            entries = [e for e in entries if e.action == action]
        if identity:
            entries = [e for e in entries if e.identity == identity]
        if event_type:
            entries = [e for e in entries if e.event_type == event_type]
        return entries

    @property
    def layer_name(self) -> str:
        return self._layer_name

    @property
    def entry_count(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def total_collected(self) -> int:
        """Entries ever collected, including the dropped ones."""
        with self._lock:
            return self._sequence


# =============================================================================
# METRICS COLLECTOR
# =============================================================================

class MetricType(Enum):
    """Types of metrics collected."""
    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass
class MetricDefinition:
    """Definition of a metric to collect."""
    name: str
    metric_type: MetricType
    description: str
    labels: Tuple[str, ...] = field(default_factory=tuple)


class MetricsCollector:
    """
    Counters and gauges for the store.

    Counters accumulate per label set; gauges keep the last value.
    Every recorded value is also kept as a MetricPoint.
    """

    def __init__(self, capacity: int):
        self._definitions: Dict[str, MetricDefinition] = {}
        self._points: Dict[str, Deque[MetricPoint]] = {}
        self._values: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], float] = {}
        self._capacity = capacity
        self._lock = threading.Lock()
        self._register_default_metrics()

    def _register_default_metrics(self):
        defaults = [
            MetricDefinition(
                name="entry_operations_total",
                metric_type=MetricType.COUNTER,
                description="Store calls by operation and outcome",
                labels=("operation", "outcome")
            ),
            MetricDefinition(
                name="entries_present",
                metric_type=MetricType.GAUGE,
                description="Number of identities with a ledger entry"
            ),
        ]
        for definition in defaults:
            self.register_metric(definition)

    def register_metric(self, definition: MetricDefinition):
        with self._lock:
            self._definitions[definition.name] = definition
            self._points.setdefault(definition.name, deque(maxlen=self._capacity))

    def _record(self, metric_name: str, value: float, labels: Tuple[Tuple[str, str], ...]):
        point = MetricPoint(
            metric_name=metric_name,
            value=value,
            timestamp=Timestamp.now(),
            labels=labels
        )
        self._points.setdefault(metric_name, deque(maxlen=self._capacity)).append(point)

    def increment(self, metric_name: str, labels: Optional[Dict[str, str]] = None, amount: float = 1.0):
        label_tuple = tuple(sorted(labels.items())) if labels else ()
        with self._lock:
            key = (metric_name, label_tuple)
            self._values[key] = self._values.get(key, 0.0) + amount
            self._record(metric_name, self._values[key], label_tuple)

    def adjust_gauge(self, metric_name: str, delta: float):
        """Move a gauge by `delta` under the collector lock."""
        with self._lock:
            key = (metric_name, ())
            self._values[key] = self._values.get(key, 0.0) + delta
            self._record(metric_name, self._values[key], ())

    def value(self, metric_name: str, labels: Optional[Dict[str, str]] = None) -> float:
        label_tuple = tuple(sorted(labels.items())) if labels else ()
        with self._lock:
            return self._values.get((metric_name, label_tuple), 0.0)

    def get_metric(self, metric_name: str) -> List[MetricPoint]:
        with self._lock:
            return list(self._points.get(metric_name, ()))

    def get_definition(self, metric_name: str) -> Optional[MetricDefinition]:
        return self._definitions.get(metric_name)


# =============================================================================
# OBSERVABILITY ENGINE
# =============================================================================

@dataclass
class ObservabilityConfig:
    """Configuration for observability engine."""
    enable_metrics: bool = True
    oplog_capacity: int = 10_000


class ObservabilityEngine:
    """
    Central Observability Engine.

    BOUNDARY ENFORCEMENT:
    - ONLY observes, never modifies
    - Never sees entry content, only identities, actions and outcomes
    """

    LAYERS = ("engine", "api")

    def __init__(self, config: Optional[ObservabilityConfig] = None):
        self._config = config or ObservabilityConfig()
        self._collectors: Dict[str, LogCollector] = {
            name: LogCollector(name, self._config.oplog_capacity)
            for name in self.LAYERS
        }
        self._metrics = (
            MetricsCollector(self._config.oplog_capacity)
            if self._config.enable_metrics else None
        )

    def record_operation(
        self,
        action: str,
        identity: Optional[str],
        event_type: AuditEventType,
        error_code: Optional[ErrorCode] = None,
        layer: str = "engine"
    ) -> AuditLogEntry:
        """Record one call and update the operation counter."""
        collector = self._collectors[layer]
        outcome = error_code.name if error_code else "success"
        if error_code is not None:
            event_type = AuditEventType.REJECTION

        def make_entry(sequence: int) -> AuditLogEntry:
            entry_id = hashlib.sha256(
                f"{layer}_{action}|{identity}|{sequence}".encode()
            ).hexdigest()[:16]
            return AuditLogEntry(
                entry_id=f"op_{entry_id}",
                event_type=event_type,
                timestamp=Timestamp.now(),
                layer=layer,
                action=action,
                identity=identity,
                outcome=outcome,
                metadata=(("status", str(error_code.status)),) if error_code else ()
            )

        entry = collector.collect(make_entry)

        if self._metrics:
            self._metrics.increment(
                "entry_operations_total",
                {"operation": action, "outcome": outcome}
            )

        if error_code is not None:
            logger.debug("%s rejected for %s: %s", action, identity, outcome)
        return entry

    def adjust_entries_present(self, delta: int):
        if self._metrics:
            self._metrics.adjust_gauge("entries_present", float(delta))

    def get_operation_log(
        self,
        action: Optional[str] = None,
        identity: Optional[str] = None,
        layers: Optional[List[str]] = None
    ) -> List[AuditLogEntry]:
        """Get the operation log from all or specified layers, oldest first."""
        target_layers = layers or list(self._collectors.keys())

        entries: List[AuditLogEntry] = []
        for layer_name in target_layers:
            collector = self._collectors.get(layer_name)
            if collector:
                entries.extend(collector.get_entries(action=action, identity=identity))

        entries.sort(key=lambda e: e.timestamp.value)
        return entries

    def get_metrics(self) -> Optional[MetricsCollector]:
        """Get metrics collector (read-only access)."""
        return self._metrics

    def generate_report(self) -> Dict:
        """Summarize the operation log by action and outcome."""
        entries = self.get_operation_log()

        by_action: Dict[str, int] = {}
        by_outcome: Dict[str, int] = {}
        for entry in entries:
            by_action[entry.action] = by_action.get(entry.action, 0) + 1
            by_outcome[entry.outcome] = by_outcome.get(entry.outcome, 0) + 1

        return {
            'total_entries': len(entries),
            'total_collected': sum(c.total_collected for c in self._collectors.values()),
            'by_action': by_action,
            'by_outcome': by_outcome,
            'generated_at': Timestamp.now().to_iso()
        }


__all__ = [
    'LogCollector',
    'MetricType',
    'MetricDefinition',
    'MetricsCollector',
    'ObservabilityConfig',
    'ObservabilityEngine',
]
