"""Evaluation interfaces.

Defines the pattern notations, the matching backend contract, and the two
collaborators the evaluation core writes to: the surface that carries
highlight spans and the sink that displays the match report.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rextool.patterns.model import MatchSet, ReportEntry
    from rextool.patterns.compiler import CompiledPattern
    from rextool.types.errors import RextoolError


class FrontendKind(Enum):
    """Available pattern notations."""

    RAW = "raw"
    SYMBOLIC = "symbolic"


class BackendKind(Enum):
    """Available matching backends."""

    NATIVE = "native"
    EXTERNAL = "external"


class MatchBackend(ABC):
    """Abstract base class for matching backends.

    Each backend kind (native, external) implements this interface and
    returns the same normalized MatchSet shape.
    """

    kind: BackendKind

    @abstractmethod
    def run(self, pattern: "CompiledPattern", text: str) -> "MatchSet":
        """Execute a compiled pattern against text.

        Args:
            pattern: Compiled pattern to execute.
            text: Sample text to scan.

        Returns:
            Matches in scan order.

        Raises:
            BackendProcessError: If a process-based backend fails.
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this backend can run in the current environment.

        Returns:
            True if the backend's engine is reachable.
        """
        pass


@runtime_checkable
class HighlightSurface(Protocol):
    """Text region that can carry tagged highlight spans."""

    def add_span(self, start: int, end: int, face: str) -> None:
        """Mark ``[start, end)`` with the given face tag."""
        ...

    def remove_spans(self, face: str) -> int:
        """Remove every span carrying the face tag.

        Returns:
            Number of spans removed.
        """
        ...

    def spans(self, face: str) -> list[tuple[int, int]]:
        """List the ``(start, end)`` spans carrying the face tag."""
        ...


@runtime_checkable
class ReportSink(Protocol):
    """Display for the per-match group report."""

    def clear(self) -> None:
        """Discard whatever the report currently shows."""
        ...

    def show_matches(self, entries: list["ReportEntry"]) -> None:
        """Display report entries in the given order."""
        ...

    def show_error(self, error: "RextoolError") -> None:
        """Display a backend failure in place of a report."""
        ...
