"""
API Mapper
==========

Transforms store results into JSON-ready DTO dicts.
Failed results become an error payload carrying the contract code.
"""
from typing import Any, Dict, Optional

from ..contracts.base import Error
from ..contracts.records import (
    Ack, Entry, EntryDiagnostics, PriorityRecord, TemporalRecord
)


def map_error(error: Error) -> Dict[str, Any]:
    return {
        "error": {
            "code": error.code.name,
            "status": error.code.status,
            "message": error.message,
            "context": dict(error.context),
        }
    }


def map_value(value: Any) -> Optional[Any]:
    """Map a successful result value to its DTO."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, Entry):
        return {"content": value.content, "completed": value.completed}
    if isinstance(value, EntryDiagnostics):
        return {
            "exists": value.exists,
            "content_length": value.content_length,
            "completed": value.completed,
        }
    if isinstance(value, PriorityRecord):
        return {"tier": int(value.tier), "label": value.tier.name.lower()}
    if isinstance(value, TemporalRecord):
        return {"deadline": value.deadline, "notified": value.notified}
    if isinstance(value, Ack):
        return {"identity": value.identity, "operation": value.operation}
    raise TypeError(f"No DTO mapping for {type(value).__name__}")
