"""
Input Validation

Pure validators for the parameters of mutating operations. Each returns
None when the input is acceptable, otherwise an INVALID_PARAMETER Error.
Validators never raise and never touch storage.
"""

from __future__ import annotations
from typing import Optional

from .contracts.base import Error, ErrorCode
from .contracts.records import PriorityTier


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

MAX_CONTENT_BYTES = 100
MIN_TIER = min(PriorityTier)
MAX_TIER = max(PriorityTier)


def _invalid(message: str, parameter: str) -> Error:
    return Error.create(ErrorCode.INVALID_PARAMETER, message).with_context(
        "parameter", parameter
    )


def validate_content(content: str, max_bytes: int = MAX_CONTENT_BYTES) -> Optional[Error]:
    """Content must be non-empty and at most max_bytes long in UTF-8."""
    if not isinstance(content, str) or not content:
        return _invalid("content must be a non-empty string", "content")

    try:
        size = len(content.encode('utf-8'))
    except UnicodeEncodeError:
        return _invalid("content must be valid UTF-8", "content")
    if size > max_bytes:
        return _invalid(
            f"content is {size} bytes, maximum is {max_bytes} bytes",
            "content"
        )
    return None


def validate_tier(tier: int) -> Optional[Error]:
    """Tier must be an integer in [1, 3]."""
    # bool is an int subclass
    if isinstance(tier, bool) or not isinstance(tier, int):
        return _invalid(f"tier must be an integer, got {tier!r}", "tier")
    if tier < MIN_TIER or tier > MAX_TIER:
        return _invalid(
            f"tier {tier} is outside acceptable range [{int(MIN_TIER)}, {int(MAX_TIER)}]",
            "tier"
        )
    return None


def validate_duration(duration_blocks: int) -> Optional[Error]:
    """Duration must be a positive number of blocks."""
    if isinstance(duration_blocks, bool) or not isinstance(duration_blocks, int):
        return _invalid(
            f"duration must be an integer, got {duration_blocks!r}",
            "duration_blocks"
        )
    if duration_blocks <= 0:
        return _invalid(
            f"duration must be greater than 0, got {duration_blocks}",
            "duration_blocks"
        )
    return None
