"""
Core value types shared by the match model and the highlight layer.
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class OffsetRange:
    """A half-open range ``[start, end)`` of 0-based character offsets."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("start must be non-negative")
        if self.end < self.start:
            raise ValueError("end must be >= start")

    @property
    def length(self) -> int:
        """Number of characters covered by this range."""
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, offset: int) -> bool:
        """Check if an offset falls inside this range."""
        return self.start <= offset < self.end

    def shifted(self, delta: int) -> "OffsetRange":
        """Return the same range moved by ``delta`` characters."""
        return OffsetRange(self.start + delta, self.end + delta)
