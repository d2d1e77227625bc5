"""
Rextool utility modules.

This package provides shared utilities used across the Rextool codebase:
- Logging (stderr, cycle-ID aware)
- Subprocess helpers for the external backend
- Small helpers
"""

# Logger
from .logger import (
    CycleContext,
    configure_logging,
    generate_cycle_id,
    get_cycle_context,
    get_cycle_id,
    is_debug_enabled,
    logger,
    with_cycle_id,
)

# Subprocess
from .subprocess_util import format_command, split_command, subprocess_kwargs

# Helpers
from .helpers import truncate

__all__ = [
    # Logger
    "CycleContext",
    "configure_logging",
    "generate_cycle_id",
    "get_cycle_context",
    "get_cycle_id",
    "is_debug_enabled",
    "logger",
    "with_cycle_id",
    # Subprocess
    "format_command",
    "split_command",
    "subprocess_kwargs",
    # Helpers
    "truncate",
]
