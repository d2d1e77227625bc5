"""Runtime configuration.

Defaults can be overridden through environment variables:

- ``REXTOOL_BACKEND``: ``native`` or ``external``
- ``REXTOOL_FRONTEND``: ``raw`` or ``symbolic``
- ``REXTOOL_PERL``: command line that reads a Perl program from stdin
- ``REXTOOL_TIMEOUT``: seconds for the external backend, ``none`` to wait
- ``REXTOOL_IGNORE_CASE``: ``true`` to fold case on both backends
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping, TypeVar

from rextool.constants import DEFAULT_EXTERNAL_TIMEOUT, DEFAULT_PERL_COMMAND
from rextool.interfaces.backends import BackendKind, FrontendKind
from rextool.types.errors import ConfigurationError, ErrorContext, RecoveryAction
from rextool.utils.subprocess_util import split_command

E = TypeVar("E", bound=Enum)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class ToolConfig:
    """Defaults for an evaluation session."""

    backend: BackendKind = BackendKind.NATIVE
    frontend: FrontendKind = FrontendKind.RAW
    perl_command: tuple[str, ...] = DEFAULT_PERL_COMMAND
    external_timeout: float | None = DEFAULT_EXTERNAL_TIMEOUT
    ignore_case: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ToolConfig":
        """Build a configuration from environment variables.

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        config = cls()

        if "REXTOOL_BACKEND" in env:
            config = replace(
                config, backend=parse_enum(BackendKind, env["REXTOOL_BACKEND"], "REXTOOL_BACKEND")
            )
        if "REXTOOL_FRONTEND" in env:
            config = replace(
                config,
                frontend=parse_enum(FrontendKind, env["REXTOOL_FRONTEND"], "REXTOOL_FRONTEND"),
            )
        if "REXTOOL_PERL" in env:
            config = replace(config, perl_command=_parse_command(env["REXTOOL_PERL"]))
        if "REXTOOL_TIMEOUT" in env:
            config = replace(config, external_timeout=_parse_timeout(env["REXTOOL_TIMEOUT"]))
        if "REXTOOL_IGNORE_CASE" in env:
            config = replace(
                config, ignore_case=_parse_bool(env["REXTOOL_IGNORE_CASE"], "REXTOOL_IGNORE_CASE")
            )

        return config

    def with_overrides(self, **changes: object) -> "ToolConfig":
        """Return a copy with the non-None values in ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _invalid(name: str, value: str, expected: str) -> ConfigurationError:
    return ConfigurationError(
        f"{name}={value!r} is invalid; expected {expected}",
        user_message=f"Invalid value for {name}.",
        context=ErrorContext(operation="load_config", additional_info={name: value}),
        recovery_actions=[RecoveryAction(f"Set {name} to {expected}")],
    )


def parse_enum(enum_cls: type[E], value: str, name: str) -> E:
    """Parse an enum member from its value, case-insensitively."""
    normalized = value.strip().lower()
    for member in enum_cls:
        if member.value == normalized:
            return member
    allowed = ", ".join(f"'{m.value}'" for m in enum_cls)
    raise _invalid(name, value, f"one of {allowed}")


def _parse_bool(value: str, name: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise _invalid(name, value, "true or false")


def _parse_timeout(value: str) -> float | None:
    normalized = value.strip().lower()
    if normalized in ("none", "off", ""):
        return None
    try:
        timeout = float(normalized)
    except ValueError:
        raise _invalid("REXTOOL_TIMEOUT", value, "a positive number of seconds or 'none'") from None
    if timeout <= 0:
        raise _invalid("REXTOOL_TIMEOUT", value, "a positive number of seconds or 'none'")
    return timeout


def _parse_command(value: str) -> tuple[str, ...]:
    try:
        argv = split_command(value)
    except ValueError:
        raise _invalid("REXTOOL_PERL", value, "a command line") from None
    if not argv:
        raise _invalid("REXTOOL_PERL", value, "a non-empty command line")
    # a bare interpreter path still needs to be told to read stdin
    if len(argv) == 1:
        argv = (argv[0], "-")
    return argv
