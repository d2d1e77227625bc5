"""Matching backends.

Available backends:
- NativeBackend: Python ``re`` in-process, errors swallowed
- ExternalBackend: Perl process, errors raised as BackendProcessError

Use ``build_backends()`` to get one backend per BackendKind for a
configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rextool.interfaces.backends import BackendKind, MatchBackend

from .external_backend import ExternalBackend, parse_records
from .native_backend import NativeBackend
from .perl_program import PerlProgram, perl_string_literal

if TYPE_CHECKING:
    from rextool.config import ToolConfig

__all__ = [
    "ExternalBackend",
    "NativeBackend",
    "PerlProgram",
    "build_backends",
    "parse_records",
    "perl_string_literal",
]


def build_backends(config: "ToolConfig") -> dict[BackendKind, MatchBackend]:
    """Create the backend registry for a configuration."""
    return {
        BackendKind.NATIVE: NativeBackend(ignore_case=config.ignore_case),
        BackendKind.EXTERNAL: ExternalBackend(
            command=config.perl_command,
            timeout=config.external_timeout,
            ignore_case=config.ignore_case,
        ),
    }
