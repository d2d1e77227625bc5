"""Native matching backend using Python's ``re`` module.

Scans the sample text with ``finditer``, which never repeats an empty match at
the same offset: it first retries there for a non-empty match and otherwise
steps one character forward, so zero-width patterns such as ``^`` or ``$``
always make progress. Matching errors never escape this backend: an invalid
or oversized pattern yields no matches and a failure mid-scan keeps whatever
was found before it.
"""

from __future__ import annotations

import re

from loguru import logger

from rextool.constants import NATIVE_BASE_FLAGS, NATIVE_MAX_GROUP
from rextool.interfaces.backends import BackendKind, MatchBackend
from rextool.patterns.compiler import CompiledPattern
from rextool.patterns.model import Match, MatchSet
from rextool.utils.helpers import truncate


class NativeBackend(MatchBackend):
    """In-process matching with the standard regex engine.

    Features:
    - Multiline line anchors, optional case folding
    - Groups 0 through 10 per match
    - No repeated zero-width match at one offset, same as Perl's /g

    Usage:
        backend = NativeBackend()
        matches = backend.run(CompiledPattern("a(b)", "a(b)"), "ab ab")
        for m in matches:
            print(m.start, m.end, m.groups)
    """

    kind = BackendKind.NATIVE

    def __init__(self, ignore_case: bool = False, max_group: int = NATIVE_MAX_GROUP):
        """Initialize native backend.

        Args:
            ignore_case: Match case-insensitively.
            max_group: Highest group index to report.
        """
        self._flags = NATIVE_BASE_FLAGS | (re.IGNORECASE if ignore_case else 0)
        self._max_group = max_group

    def is_available(self) -> bool:
        return True

    def run(self, pattern: CompiledPattern, text: str) -> MatchSet:
        """Scan ``text`` for every occurrence of ``pattern``.

        Args:
            pattern: Compiled pattern to execute.
            text: Sample text to scan.

        Returns:
            Matches accumulated before the end of text or the first error.
        """
        if pattern.is_empty:
            return MatchSet.empty()

        try:
            compiled = re.compile(pattern.regex, self._flags)
        except (re.error, OverflowError, RecursionError) as e:
            logger.debug(f"Invalid regex '{truncate(pattern.regex, 100)}': {e}")
            return MatchSet.empty()

        matches: list[Match] = []
        try:
            self._scan(compiled, text, matches)
        except (re.error, RuntimeError, OverflowError, RecursionError) as e:
            logger.debug(f"Native scan stopped after {len(matches)} matches: {e}")

        return MatchSet(tuple(matches))

    def _scan(self, compiled: re.Pattern, text: str, out: list[Match]) -> None:
        group_limit = min(compiled.groups, self._max_group)
        for found in compiled.finditer(text):
            start, end = found.span()
            groups = {i: found.group(i) for i in range(1, group_limit + 1)}
            out.append(Match.from_text(text, start, end, groups))
