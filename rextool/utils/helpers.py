"""Small, dependency-free helper functions used across the codebase."""

from __future__ import annotations


def truncate(text: str, limit: int = 200) -> str:
    """Shorten text for log and error messages."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."
