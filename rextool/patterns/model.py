"""Backend-agnostic match model.

Both matching backends normalize their raw results into the types defined
here, so the highlight layer and the report never see backend specifics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Mapping

from rextool.types.core import OffsetRange


@dataclass(frozen=True)
class ReportEntry:
    """One ``(group index, group value)`` line of a match report."""

    match_index: int
    group_index: int
    value: str | None

    def label(self) -> str:
        """Text shown for this entry in a report."""
        value = "" if self.value is None else self.value
        return f"Group {self.group_index}: '{value}'"


@dataclass(frozen=True)
class Match:
    """A single occurrence of a pattern in the sample text.

    Offsets are 0-based and absolute relative to the start of the sample
    text. ``groups`` maps group index to matched substring, or None for a
    group that did not participate. Index 0 is always the whole match.
    """

    start: int
    end: int
    groups: Mapping[int, str | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("start must be non-negative")
        if self.end < self.start:
            raise ValueError("end must be >= start")
        if 0 not in self.groups or self.groups[0] is None:
            raise ValueError("group 0 must be present")
        if len(self.groups[0]) != self.end - self.start:
            raise ValueError("group 0 must span the match extent")
        ordered = dict(sorted(self.groups.items()))
        object.__setattr__(self, "groups", ordered)

    @classmethod
    def from_text(
        cls,
        text: str,
        start: int,
        end: int,
        groups: Mapping[int, str | None] | None = None,
    ) -> "Match":
        """Build a match whose group 0 is taken from ``text[start:end]``."""
        values = dict(groups or {})
        values[0] = text[start:end]
        return cls(start=start, end=end, groups=values)

    @property
    def text(self) -> str:
        """The full matched substring."""
        return self.groups[0] or ""

    @property
    def extent(self) -> OffsetRange:
        return OffsetRange(self.start, self.end)

    def group(self, index: int) -> str | None:
        """Value of a capture group, None when absent or unmatched."""
        return self.groups.get(index)

    def report_entries(self, match_index: int) -> list[ReportEntry]:
        """Report lines for this match, in group order."""
        return [
            ReportEntry(match_index, index, value)
            for index, value in self.groups.items()
        ]

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "start": self.start,
            "end": self.end,
            "groups": {str(k): v for k, v in self.groups.items()},
        }


@dataclass(frozen=True)
class MatchSet:
    """Ordered, non-overlapping matches in left-to-right scan order.

    A zero-length match may share its start with the end of the previous
    match, but matches never overlap and starts never decrease.
    """

    matches: tuple[Match, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "matches", tuple(self.matches))
        previous: Match | None = None
        for match in self.matches:
            if previous is not None:
                if match.start < previous.end:
                    raise ValueError(
                        f"match at {match.start} overlaps match ending at {previous.end}"
                    )
                if match.start < previous.start:
                    raise ValueError("matches must be in scan order")
            previous = match

    @classmethod
    def empty(cls) -> "MatchSet":
        return cls(())

    def __iter__(self) -> Iterator[Match]:
        return iter(self.matches)

    def __len__(self) -> int:
        return len(self.matches)

    def __getitem__(self, index: int) -> Match:
        return self.matches[index]

    def __bool__(self) -> bool:
        return bool(self.matches)

    def extents(self) -> list[OffsetRange]:
        return [m.extent for m in self.matches]

    def report_entries(self) -> list[ReportEntry]:
        """All report lines, match by match, preserving scan order."""
        entries: list[ReportEntry] = []
        for i, match in enumerate(self.matches):
            entries.extend(match.report_entries(i))
        return entries

    def to_list(self) -> list[dict]:
        return [m.to_dict() for m in self.matches]
