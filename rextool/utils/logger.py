"""
Logging utility for the evaluation core and the terminal front end.

All logs go to STDERR so that match reports and JSON output on STDOUT stay
clean for piping.

Cycle ID Support:
- Every recomputation runs inside a cycle context held in a contextvar
- The cycle ID is injected into each log record as ``extra["cycle_id"]``
- Use with_cycle_id() for a scoped cycle ID
"""

import os
import secrets
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Generator

from loguru import logger as loguru_logger

# ============================================================================
# Cycle Context
# ============================================================================


@dataclass
class CycleContext:
    """Recomputation cycle context for log correlation."""

    cycle_id: str
    trigger: str | None = None
    start_time: float | None = None

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since the cycle started."""
        if self.start_time is None:
            return 0.0
        return (time.time() - self.start_time) * 1000.0


_cycle_context: ContextVar[CycleContext | None] = ContextVar(
    "cycle_context", default=None
)


def generate_cycle_id() -> str:
    """
    Generate a unique recomputation cycle ID.

    Format: cyc_<timestamp_base36>_<random_hex>
    """
    timestamp = int(time.time() * 1000)
    random_part = secrets.token_hex(4)
    return f"cyc_{base36_encode(timestamp)}_{random_part}"


def base36_encode(number: int) -> str:
    """Encode an integer to base36 string."""
    if number == 0:
        return "0"

    chars = "0123456789abcdefghijklmnopqrstuvwxyz"
    result = []
    while number:
        result.append(chars[number % 36])
        number //= 36
    return "".join(reversed(result))


def get_cycle_context() -> CycleContext | None:
    """Get the current cycle context (if any)."""
    return _cycle_context.get()


def get_cycle_id() -> str | None:
    """Get the current cycle ID (if any)."""
    ctx = get_cycle_context()
    return ctx.cycle_id if ctx else None


@contextmanager
def with_cycle_id(
    cycle_id: str | None = None,
    trigger: str | None = None,
) -> Generator[CycleContext, None, None]:
    """
    Context manager for running one recomputation under a cycle ID.

    Args:
        cycle_id: The cycle ID to use (generated when omitted)
        trigger: Name of the input whose change started the cycle

    Yields:
        The CycleContext object
    """
    context = CycleContext(
        cycle_id=cycle_id or generate_cycle_id(),
        trigger=trigger,
        start_time=time.time(),
    )
    token = _cycle_context.set(context)
    try:
        yield context
    finally:
        _cycle_context.reset(token)


# ============================================================================
# Logger Configuration
# ============================================================================

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[cycle_id]}</cyan> | {name}:{function} - {message}"
)


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    for name in ("REXTOOL_DEBUG", "DEBUG"):
        if os.environ.get(name, "").lower() == "true":
            return True
    return False


def _inject_cycle_id(record: dict) -> None:
    record["extra"]["cycle_id"] = get_cycle_id() or "-"


def configure_logging(debug: bool | None = None) -> None:
    """
    Route loguru output to STDERR at INFO level, or DEBUG when enabled.

    Args:
        debug: Force debug logging on or off; defaults to the environment.
    """
    if debug is None:
        debug = is_debug_enabled()
    loguru_logger.remove()
    loguru_logger.configure(patcher=_inject_cycle_id)
    loguru_logger.add(
        sys.stderr,
        level="DEBUG" if debug else "INFO",
        format=LOG_FORMAT,
        colorize=None,
    )


# Export loguru logger for direct use
logger = loguru_logger
