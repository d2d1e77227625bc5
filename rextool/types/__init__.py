"""
Rextool type definitions.

This module exports the shared value types and the error hierarchy.
"""

# Core types
from .core import OffsetRange

# Error types
from .errors import (
    BackendProcessError,
    ConfigurationError,
    ErrorCode,
    ErrorContext,
    ErrorSeverity,
    PatternCompileError,
    RecoveryAction,
    RextoolError,
)

__all__ = [
    # Core types
    "OffsetRange",
    # Error types
    "ErrorCode",
    "ErrorSeverity",
    "RecoveryAction",
    "ErrorContext",
    "RextoolError",
    "ConfigurationError",
    "PatternCompileError",
    "BackendProcessError",
]
