"""Highlight spans derived from a MatchSet.

The manager owns every span carrying its face tag on a surface. Each
application removes all of them first and then adds one span per match, so
the visible spans always equal the current MatchSet, never a stale or
duplicated one.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from rextool.constants import MATCH_FACE
from rextool.interfaces.backends import HighlightSurface
from rextool.patterns.model import MatchSet
from rextool.types.core import OffsetRange


@dataclass(frozen=True, order=True)
class HighlightSpan:
    """An absolute highlighted range on the surface."""

    start: int
    end: int

    @property
    def extent(self) -> OffsetRange:
        return OffsetRange(self.start, self.end)


class HighlightManager:
    """Keeps a surface's match highlights in sync with a MatchSet."""

    def __init__(self, surface: HighlightSurface, face: str = MATCH_FACE):
        self._surface = surface
        self._face = face
        self._spans: tuple[HighlightSpan, ...] = ()

    @property
    def face(self) -> str:
        return self._face

    @property
    def spans(self) -> tuple[HighlightSpan, ...]:
        """Spans created by the last application."""
        return self._spans

    def clear(self) -> None:
        """Remove every span this manager owns."""
        removed = self._surface.remove_spans(self._face)
        if removed:
            logger.debug(f"Cleared {removed} highlight spans")
        self._spans = ()

    def apply(self, match_set: MatchSet, region_start: int = 0) -> tuple[HighlightSpan, ...]:
        """Replace the highlights with one span per match.

        Args:
            match_set: Matches to highlight.
            region_start: Absolute offset of the sample text on the surface.

        Returns:
            The spans now on the surface.
        """
        self.clear()
        extents = (m.extent.shifted(region_start) for m in match_set)
        spans = tuple(HighlightSpan(e.start, e.end) for e in extents)
        for span in spans:
            self._surface.add_span(span.start, span.end, self._face)
        self._spans = spans
        return spans
