"""External matching backend driving a Perl process.

Each evaluation renders a small Perl program (see ``perl_program``), feeds
it to the configured command on stdin and reads back one JSON array of
match records. Any failure of the process or of its output is fatal for the
evaluation: nothing is salvaged, a BackendProcessError is raised instead.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from typing import Any, Sequence

from loguru import logger

from rextool.constants import (
    DEFAULT_EXTERNAL_TIMEOUT,
    DEFAULT_PERL_COMMAND,
    EXTERNAL_MAX_GROUP,
    PRECEDING_LENGTH_BIAS,
)
from rextool.interfaces.backends import BackendKind, MatchBackend
from rextool.patterns.compiler import CompiledPattern
from rextool.patterns.model import Match, MatchSet
from rextool.types.errors import (
    BackendProcessError,
    ErrorCode,
    ErrorContext,
    RecoveryAction,
)
from rextool.utils.helpers import truncate
from rextool.utils.subprocess_util import format_command, subprocess_kwargs

from .perl_program import PerlProgram


def _context(operation: str, **info: Any) -> ErrorContext:
    return ErrorContext(
        operation=operation,
        backend=BackendKind.EXTERNAL.value,
        component="ExternalBackend",
        additional_info=info,
    )


def _malformed(message: str, output: str) -> BackendProcessError:
    return BackendProcessError(
        message,
        code=ErrorCode.BACKEND_OUTPUT_MALFORMED,
        user_message="External backend produced output that could not be read.",
        context=_context("parse", output=truncate(output)),
    )


def parse_records(output: str, text: str) -> MatchSet:
    """Normalize the engine's JSON records into a MatchSet.

    Each record is ``[preceding_length, match_length, [[index, value], ...]]``.
    The start offset is the preceding length plus PRECEDING_LENGTH_BIAS and
    group 0 is synthesized from the sample text.

    Args:
        output: Raw stdout of the engine process.
        text: Sample text the engine scanned.

    Returns:
        Normalized matches in the engine's order.

    Raises:
        BackendProcessError: If the output is not the expected structure.
    """
    try:
        records = json.loads(output)
    except json.JSONDecodeError as e:
        raise _malformed(f"Engine output is not JSON: {e}", output) from e

    if not isinstance(records, list):
        raise _malformed("Engine output is not a list of records", output)

    matches: list[Match] = []
    for position, record in enumerate(records):
        if not (isinstance(record, list) and len(record) == 3):
            raise _malformed(f"Record {position} is not a 3-element list", output)
        preceding, length, pairs = record
        if not (_is_count(preceding) and _is_count(length) and isinstance(pairs, list)):
            raise _malformed(f"Record {position} has invalid fields", output)

        start = preceding + PRECEDING_LENGTH_BIAS
        end = start + length
        if start < 0 or end > len(text):
            raise _malformed(
                f"Record {position} spans [{start}, {end}) outside text of length {len(text)}",
                output,
            )

        groups: dict[int, str | None] = {}
        for pair in pairs:
            if not (
                isinstance(pair, list)
                and len(pair) == 2
                and _is_count(pair[0])
                and (pair[1] is None or isinstance(pair[1], str))
            ):
                raise _malformed(f"Record {position} has an invalid group entry", output)
            index, value = pair
            if index != 0:
                groups[index] = value

        matches.append(Match.from_text(text, start, end, groups))

    try:
        return MatchSet(tuple(matches))
    except ValueError as e:
        raise _malformed(f"Engine records are not in scan order: {e}", output) from e


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class ExternalBackend(MatchBackend):
    """Matching through an external Perl process.

    Features:
    - Program on stdin, sample text in the program's data section
    - Groups 0 through 20 per match
    - Timeout, missing executable, bad exit and bad output all raise

    Usage:
        backend = ExternalBackend()
        if backend.is_available():
            matches = backend.run(CompiledPattern("a(b)", "a(b)"), "ab ab")
    """

    kind = BackendKind.EXTERNAL

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_PERL_COMMAND,
        timeout: float | None = DEFAULT_EXTERNAL_TIMEOUT,
        ignore_case: bool = False,
        max_group: int = EXTERNAL_MAX_GROUP,
    ):
        """Initialize external backend.

        Args:
            command: Argv that reads a program from stdin.
            timeout: Seconds to wait for the process, None for no limit.
            ignore_case: Match case-insensitively.
            max_group: Highest group index to request.
        """
        if not command:
            raise ValueError("command must not be empty")
        self._command = tuple(command)
        self._timeout = timeout
        self._ignore_case = ignore_case
        self._max_group = max_group

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    def is_available(self) -> bool:
        """Check if the configured executable can be found."""
        return shutil.which(self._command[0]) is not None

    def run(self, pattern: CompiledPattern, text: str) -> MatchSet:
        """Run the pattern through the external engine.

        Args:
            pattern: Compiled pattern to execute.
            text: Sample text to scan.

        Returns:
            Normalized matches.

        Raises:
            BackendProcessError: If the process or its output fails.
        """
        # Perl reuses the last successful pattern for an empty one
        if pattern.is_empty:
            return MatchSet.empty()

        program = PerlProgram(
            pattern=pattern.regex,
            text=text,
            ignore_case=self._ignore_case,
            max_group=self._max_group,
        )
        output = self._execute(program)
        return parse_records(output, text)

    def _execute(self, program: PerlProgram) -> str:
        command_str = format_command(self._command)
        try:
            payload = program.encode()
        except UnicodeEncodeError as e:
            raise BackendProcessError(
                f"Pattern or sample text cannot be encoded as UTF-8: {e.reason}",
                code=ErrorCode.BACKEND_INPUT_UNENCODABLE,
                user_message="Sample text contains characters the external backend cannot receive.",
                context=_context("encode", command=command_str, position=e.start),
                original_error=e,
            ) from e

        logger.debug(f"Running external backend: {command_str}")
        try:
            completed = subprocess.run(
                self._command,
                input=payload,
                capture_output=True,
                timeout=self._timeout,
                check=False,
                **subprocess_kwargs(),
            )
        except FileNotFoundError as e:
            raise BackendProcessError(
                f"Executable not found: {self._command[0]}",
                code=ErrorCode.BACKEND_UNAVAILABLE,
                user_message="External backend executable is not installed.",
                context=_context("spawn", command=command_str),
                recovery_actions=[
                    RecoveryAction("Install perl or point REXTOOL_PERL at a Perl interpreter"),
                    RecoveryAction("Switch to the native backend", command="--backend native"),
                ],
                original_error=e,
            ) from e
        except PermissionError as e:
            raise BackendProcessError(
                f"Executable not runnable: {self._command[0]}",
                code=ErrorCode.BACKEND_UNAVAILABLE,
                user_message="External backend executable cannot be run.",
                context=_context("spawn", command=command_str),
                original_error=e,
            ) from e
        except subprocess.TimeoutExpired as e:
            raise BackendProcessError(
                f"External backend did not finish within {self._timeout}s",
                code=ErrorCode.BACKEND_TIMEOUT,
                user_message="External backend timed out.",
                context=_context("run", command=command_str, timeout=self._timeout),
                recovery_actions=[RecoveryAction("Raise REXTOOL_TIMEOUT or simplify the pattern")],
                original_error=e,
            ) from e

        stderr = completed.stderr.decode("utf-8", errors="replace")
        if completed.returncode != 0:
            logger.warning(
                f"External backend exited with {completed.returncode}: {truncate(stderr.strip())}"
            )
            raise BackendProcessError(
                f"External backend exited with status {completed.returncode}: "
                f"{truncate(stderr.strip())}",
                code=ErrorCode.BACKEND_EXIT_FAILED,
                user_message="External backend failed to run the pattern.",
                context=_context("run", command=command_str, returncode=completed.returncode),
                stderr=stderr,
            )

        try:
            return completed.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise BackendProcessError(
                "External backend output is not UTF-8",
                code=ErrorCode.BACKEND_OUTPUT_MALFORMED,
                user_message="External backend produced output that could not be read.",
                context=_context("decode", command=command_str),
                original_error=e,
                stderr=stderr,
            ) from e
