"""Pattern compilation from frontend notations.

Turns what the user typed into a regex string a backend can execute. Raw
input passes through untouched; symbolic input is read as rx forms and
lowered. A symbolic pattern that fails to compile is absent, which the rest
of the pipeline treats exactly like an empty pattern.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from rextool.interfaces.backends import FrontendKind
from rextool.types.errors import ErrorContext, PatternCompileError

from .rx import rx_to_regex
from .sexp import read_forms


@dataclass(frozen=True)
class CompiledPattern:
    """A regex string ready for a backend, with the input it came from."""

    regex: str
    source: str
    frontend: FrontendKind = FrontendKind.RAW

    @property
    def is_empty(self) -> bool:
        return self.regex == ""


class PatternCompiler:
    """Compiles pattern source text for a given frontend.

    Usage:
        compiler = PatternCompiler()
        compiled = compiler.compile('(seq "a" (group "b"))', FrontendKind.SYMBOLIC)
        if compiled is not None:
            print(compiled.regex)  # a(b)
    """

    def compile(
        self,
        source: str,
        frontend: FrontendKind = FrontendKind.RAW,
    ) -> CompiledPattern | None:
        """Compile a pattern, degrading failures to an absent pattern.

        Args:
            source: Pattern text as entered.
            frontend: Notation the text is written in.

        Returns:
            The compiled pattern, or None when symbolic compilation fails.
        """
        try:
            return self.compile_strict(source, frontend)
        except PatternCompileError as e:
            logger.debug(f"Symbolic pattern treated as absent: {e}")
            return None

    def compile_strict(
        self,
        source: str,
        frontend: FrontendKind = FrontendKind.RAW,
    ) -> CompiledPattern:
        """Compile a pattern, raising on failure.

        Args:
            source: Pattern text as entered.
            frontend: Notation the text is written in.

        Returns:
            The compiled pattern.

        Raises:
            PatternCompileError: If a symbolic pattern cannot be read or lowered.
        """
        if frontend is FrontendKind.RAW:
            return CompiledPattern(regex=source, source=source, frontend=frontend)

        try:
            regex = rx_to_regex(read_forms(source))
        except PatternCompileError as e:
            e.context.operation = "compile"
            e.context.frontend = frontend.value
            raise
        except RecursionError as e:
            raise PatternCompileError(
                "Symbolic pattern is nested too deeply",
                context=ErrorContext(operation="compile", frontend=frontend.value),
                original_error=e,
            ) from e

        return CompiledPattern(regex=regex, source=source, frontend=frontend)
