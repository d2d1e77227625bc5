"""In-memory collaborators for the evaluation core.

TextBuffer stands in for an editable text region that can carry tagged
spans; MatchReport stands in for the scrollable report. The terminal front
end renders both.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rextool.patterns.model import ReportEntry
from rextool.types.errors import RextoolError


@dataclass
class TextBuffer:
    """A text region holding tagged ``(start, end)`` spans.

    ``region_start`` is the absolute offset where the sample text begins,
    for buffers that carry a header above it.
    """

    text: str = ""
    region_start: int = 0
    _spans: list[tuple[int, int, str]] = field(default_factory=list, repr=False)

    @property
    def region_end(self) -> int:
        return self.region_start + len(self.text)

    def add_span(self, start: int, end: int, face: str) -> None:
        if start < 0 or end < start:
            raise ValueError(f"invalid span [{start}, {end})")
        self._spans.append((start, end, face))

    def remove_spans(self, face: str) -> int:
        before = len(self._spans)
        self._spans = [s for s in self._spans if s[2] != face]
        return before - len(self._spans)

    def spans(self, face: str) -> list[tuple[int, int]]:
        return sorted((start, end) for start, end, f in self._spans if f == face)

    def faces(self) -> set[str]:
        return {f for _, _, f in self._spans}


class MatchReport:
    """The match/group report as last published."""

    def __init__(self) -> None:
        self.entries: list[ReportEntry] = []
        self.error: RextoolError | None = None

    def clear(self) -> None:
        self.entries = []
        self.error = None

    def show_matches(self, entries: list[ReportEntry]) -> None:
        self.entries = list(entries)
        self.error = None

    def show_error(self, error: RextoolError) -> None:
        self.entries = []
        self.error = error

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def lines(self) -> list[str]:
        """Report text, one line per group, a blank line between matches."""
        if self.error is not None:
            return self.error.get_formatted_message().splitlines()
        out: list[str] = []
        current = None
        for entry in self.entries:
            if current is not None and entry.match_index != current:
                out.append("")
            current = entry.match_index
            out.append(entry.label())
        return out
