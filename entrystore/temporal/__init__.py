"""
Height source collaborator for deadline computation.
"""

from .clock import HeightSource, LogicalHeight, HeightLogExhausted

__all__ = [
    'HeightSource',
    'LogicalHeight',
    'HeightLogExhausted',
]
