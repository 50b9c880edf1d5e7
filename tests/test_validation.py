"""
Validator Tests
"""

import pytest

from entrystore import ErrorCode
from entrystore.validation import validate_content, validate_duration, validate_tier


class TestContent:

    def test_accepts_short_content(self):
        assert validate_content("hello") is None

    def test_rejects_empty(self):
        error = validate_content("")
        assert error.code == ErrorCode.INVALID_PARAMETER
        assert error.context_value("parameter") == "content"

    def test_rejects_non_string(self):
        assert validate_content(None).code == ErrorCode.INVALID_PARAMETER

    def test_rejects_unencodable_text(self):
        error = validate_content("\ud800")
        assert error.code == ErrorCode.INVALID_PARAMETER
        assert error.message == "content must be valid UTF-8"

    def test_custom_limit(self):
        assert validate_content("abc", max_bytes=3) is None
        assert validate_content("abcd", max_bytes=3) is not None


class TestTier:

    @pytest.mark.parametrize("tier", [1, 2, 3])
    def test_in_range(self, tier):
        assert validate_tier(tier) is None

    @pytest.mark.parametrize("tier", [0, 4, True, "2", 2.0])
    def test_rejected(self, tier):
        error = validate_tier(tier)
        assert error.code == ErrorCode.INVALID_PARAMETER
        assert error.context_value("parameter") == "tier"


class TestDuration:

    def test_positive(self):
        assert validate_duration(1) is None

    @pytest.mark.parametrize("duration", [0, -1, False, 1.5])
    def test_rejected(self, duration):
        assert validate_duration(duration).code == ErrorCode.INVALID_PARAMETER
