"""Shared constants and helpers for Rextool.

Centralizes group-index bounds, default regex flags, external-process
defaults and timezone-aware datetime helpers.
"""

import re
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime.

    Used as a ``default_factory`` in dataclass fields.
    """
    return datetime.now(timezone.utc)


# Highest capture-group index reported by the native backend.
NATIVE_MAX_GROUP: int = 10

# Highest capture-group index requested from the external engine.
EXTERNAL_MAX_GROUP: int = 20

# Flags every native evaluation runs with. Line anchors match per line.
NATIVE_BASE_FLAGS: int = re.MULTILINE

# Command used for the external backend; the program arrives on stdin.
DEFAULT_PERL_COMMAND: tuple[str, ...] = ("perl", "-")

# Seconds before an external evaluation is abandoned. None waits forever.
DEFAULT_EXTERNAL_TIMEOUT: float | None = 30.0

# Correction applied to the external engine's preceding-text length to get
# a 0-based start offset. Perl's $-[0] is already 0-based.
PRECEDING_LENGTH_BIAS: int = 0

# Face tag identifying the spans the highlight manager owns on a surface.
MATCH_FACE: str = "rextool-match"
