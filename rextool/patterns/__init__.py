"""Pattern Compilation and Match Model.

This package turns frontend input into regex strings and defines the
backend-agnostic result types.

Components:
- Match / MatchSet / ReportEntry: Normalized match results
- CompiledPattern / PatternCompiler: Raw and symbolic frontends
- read_forms: S-expression reader for the symbolic notation
- rx_to_regex: Lowering of rx forms to a regex string

Usage:
    from rextool.patterns import PatternCompiler
    from rextool.interfaces import FrontendKind

    compiled = PatternCompiler().compile("(+ digit)", FrontendKind.SYMBOLIC)
    print(compiled.regex)  # [0-9]+
"""

from .model import Match, MatchSet, ReportEntry
from .compiler import CompiledPattern, PatternCompiler
from .sexp import Symbol, read_forms
from .rx import RxLowering, rx_to_regex

__all__ = [
    "Match",
    "MatchSet",
    "ReportEntry",
    "CompiledPattern",
    "PatternCompiler",
    "Symbol",
    "read_forms",
    "RxLowering",
    "rx_to_regex",
]
