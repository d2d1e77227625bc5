"""
Phase 1 Tests: Core Types

These tests verify that the offset range dataclass works correctly:
- Correct fields
- Validation behavior
- Serialization to dict
"""

import pytest
from dataclasses import asdict

from rextool.types import OffsetRange


class TestOffsetRange:
    """Tests for OffsetRange dataclass."""

    def test_creation(self):
        """OffsetRange can be created with start and end."""
        range_ = OffsetRange(start=10, end=20)
        assert range_.start == 10
        assert range_.end == 20

    def test_serialization(self):
        """OffsetRange serializes to dict."""
        parsed = asdict(OffsetRange(start=1, end=5))
        assert parsed == {"start": 1, "end": 5}

    def test_contains_is_half_open(self):
        """OffsetRange.contains excludes the end offset."""
        range_ = OffsetRange(start=10, end=20)
        assert range_.contains(10) is True
        assert range_.contains(19) is True
        assert range_.contains(20) is False
        assert range_.contains(9) is False

    def test_length_and_empty(self):
        assert OffsetRange(3, 7).length == 4
        assert OffsetRange(3, 3).is_empty()
        assert not OffsetRange(3, 4).is_empty()

    def test_shifted(self):
        assert OffsetRange(2, 4).shifted(10) == OffsetRange(12, 14)

    def test_ordering(self):
        ranges = [OffsetRange(5, 6), OffsetRange(0, 2), OffsetRange(0, 1)]
        assert sorted(ranges) == [OffsetRange(0, 1), OffsetRange(0, 2), OffsetRange(5, 6)]

    def test_validation_start_negative(self):
        """OffsetRange rejects negative start."""
        with pytest.raises(ValueError, match="start must be non-negative"):
            OffsetRange(start=-1, end=10)

    def test_validation_end_before_start(self):
        """OffsetRange rejects end before start."""
        with pytest.raises(ValueError, match="end must be >= start"):
            OffsetRange(start=20, end=10)
