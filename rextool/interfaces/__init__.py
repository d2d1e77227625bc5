"""
Rextool interfaces.

This module exports all interface definitions for the Rextool system.
"""

from .backends import (
    BackendKind,
    FrontendKind,
    HighlightSurface,
    MatchBackend,
    ReportSink,
)

__all__ = [
    "BackendKind",
    "FrontendKind",
    "HighlightSurface",
    "MatchBackend",
    "ReportSink",
]
