"""Lowering of rx-style symbolic forms to regex strings.

The emitted regex only uses constructs that Python ``re`` and Perl read the
same way, so a symbolic pattern behaves identically on both backends.

Lowering tracks the binding strength of every fragment so that operands are
wrapped in ``(?:...)`` only when an operator would otherwise capture too
little or too much.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable

from rextool.types.errors import ErrorCode, PatternCompileError

from .sexp import Form, Symbol


class Prec(IntEnum):
    """Binding strength of a regex fragment."""

    ALT = 0
    SEQ = 1
    ATOM = 2


@dataclass(frozen=True)
class Fragment:
    text: str
    prec: Prec

    def wrapped(self, at_least: Prec) -> str:
        """Text of this fragment, grouped if it binds weaker than needed."""
        if self.prec >= at_least:
            return self.text
        return f"(?:{self.text})"


_NEVER = Fragment("(?!)", Prec.ATOM)

# Character classes by name, as the body of a bracket expression.
_CLASS_BODIES: dict[str, str] = {
    "digit": "0-9",
    "numeric": "0-9",
    "num": "0-9",
    "alpha": "a-zA-Z",
    "alphabetic": "a-zA-Z",
    "letter": "a-zA-Z",
    "alnum": "a-zA-Z0-9",
    "alphanumeric": "a-zA-Z0-9",
    "upper": "A-Z",
    "upper-case": "A-Z",
    "lower": "a-z",
    "lower-case": "a-z",
    "xdigit": "0-9a-fA-F",
    "hex-digit": "0-9a-fA-F",
    "hex": "0-9a-fA-F",
    "space": r"\s",
    "whitespace": r"\s",
    "white": r"\s",
    "word": r"\w",
    "wordchar": r"\w",
    "blank": r" \t",
    "punct": r"!-/:-@\[-`{-~",
    "punctuation": r"!-/:-@\[-`{-~",
    "cntrl": r"\x00-\x1f\x7f",
    "control": r"\x00-\x1f\x7f",
    "anything": r"\s\S",
    "anychar": r"\s\S",
}

_ANCHORS: dict[str, Fragment] = {
    "bol": Fragment("^", Prec.SEQ),
    "line-start": Fragment("^", Prec.SEQ),
    "eol": Fragment("$", Prec.SEQ),
    "line-end": Fragment("$", Prec.SEQ),
    "bos": Fragment(r"\A", Prec.SEQ),
    "string-start": Fragment(r"\A", Prec.SEQ),
    "buffer-start": Fragment(r"\A", Prec.SEQ),
    "bot": Fragment(r"\A", Prec.SEQ),
    # \Z and \z disagree between the two dialects
    "eos": Fragment(r"(?![\s\S])", Prec.SEQ),
    "string-end": Fragment(r"(?![\s\S])", Prec.SEQ),
    "buffer-end": Fragment(r"(?![\s\S])", Prec.SEQ),
    "eot": Fragment(r"(?![\s\S])", Prec.SEQ),
    "word-boundary": Fragment(r"\b", Prec.SEQ),
    "not-word-boundary": Fragment(r"\B", Prec.SEQ),
    "bow": Fragment(r"\b(?=\w)", Prec.SEQ),
    "word-start": Fragment(r"\b(?=\w)", Prec.SEQ),
    "eow": Fragment(r"\b(?<=\w)", Prec.SEQ),
    "word-end": Fragment(r"\b(?<=\w)", Prec.SEQ),
    "nonl": Fragment(".", Prec.ATOM),
    "not-newline": Fragment(".", Prec.ATOM),
    "any": Fragment(".", Prec.ATOM),
}

_CLASS_SPECIALS = set("\\]^-[")


def _unsupported(message: str) -> PatternCompileError:
    return PatternCompileError(
        message,
        code=ErrorCode.PATTERN_FORM_UNSUPPORTED,
        user_message="Symbolic pattern uses an unsupported form.",
    )


def _escape_class_char(ch: str) -> str:
    if ch in _CLASS_SPECIALS:
        return "\\" + ch
    if ch == "\n":
        return r"\n"
    if ch == "\t":
        return r"\t"
    return ch


def _literal(text: str) -> Fragment:
    escaped = re.escape(text)
    if len(text) == 1:
        return Fragment(escaped, Prec.ATOM)
    return Fragment(escaped, Prec.SEQ)


def _count(value: Form, what: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise _unsupported(f"{what} must be a non-negative integer, got {value!r}")
    return value


class RxLowering:
    """Lowers rx forms to regex fragments.

    Usage:
        lowering = RxLowering()
        regex = lowering.lower_all(read_forms('(seq bol (group (+ digit)))'))
    """

    def __init__(self) -> None:
        self._greedy = True
        self._handlers: dict[str, Callable[[list[Form]], Fragment]] = {
            "seq": self._seq,
            ":": self._seq,
            "and": self._seq,
            "sequence": self._seq,
            "or": self._or,
            "|": self._or,
            "group": self._group,
            "submatch": self._group,
            "zero-or-more": lambda args: self._repeat(args, "*", None),
            "*": lambda args: self._repeat(args, "*", None),
            "0+": lambda args: self._repeat(args, "*", True),
            "one-or-more": lambda args: self._repeat(args, "+", None),
            "+": lambda args: self._repeat(args, "+", None),
            "1+": lambda args: self._repeat(args, "+", True),
            "opt": lambda args: self._repeat(args, "?", None),
            "optional": lambda args: self._repeat(args, "?", None),
            "zero-or-one": lambda args: self._repeat(args, "?", None),
            "?": lambda args: self._repeat(args, "?", None),
            "*?": lambda args: self._repeat(args, "*", False),
            "+?": lambda args: self._repeat(args, "+", False),
            "??": lambda args: self._repeat(args, "?", False),
            "minimal-match": lambda args: self._with_greed(args, False),
            "maximal-match": lambda args: self._with_greed(args, True),
            "=": self._exactly,
            ">=": self._at_least,
            "**": self._between,
            "repeat": self._repeat_counted,
            "any": lambda args: self._char_class(args, negated=False),
            "in": lambda args: self._char_class(args, negated=False),
            "char": lambda args: self._char_class(args, negated=False),
            "not": self._not,
            "backref": self._backref,
            "regexp": self._raw,
            "regex": self._raw,
            "literal": self._literal_form,
        }

    def lower_all(self, forms: list[Form]) -> str:
        """Lower top-level forms, read as an implicit sequence."""
        return self._seq(forms).text

    def lower(self, form: Form) -> Fragment:
        if isinstance(form, Symbol):
            return self._symbol(form)
        if isinstance(form, str):
            return _literal(form)
        if isinstance(form, list):
            if not form:
                raise _unsupported("empty form")
            head = form[0]
            if not isinstance(head, Symbol):
                raise _unsupported(f"form must start with a symbol, got {head!r}")
            handler = self._handlers.get(str(head))
            if handler is None:
                raise _unsupported(f"unknown form '{head}'")
            return handler(form[1:])
        raise _unsupported(f"cannot use {form!r} as a pattern")

    def _symbol(self, name: Symbol) -> Fragment:
        anchor = _ANCHORS.get(str(name))
        if anchor is not None:
            return anchor
        body = _CLASS_BODIES.get(str(name))
        if body is not None:
            return Fragment(f"[{body}]", Prec.ATOM)
        raise _unsupported(f"unknown symbol '{name}'")

    # --- structure -------------------------------------------------------

    def _seq(self, args: list[Form]) -> Fragment:
        parts = [self.lower(arg) for arg in args]
        if not parts:
            return Fragment("", Prec.SEQ)
        if len(parts) == 1:
            return parts[0]
        return Fragment("".join(p.wrapped(Prec.SEQ) for p in parts), Prec.SEQ)

    def _or(self, args: list[Form]) -> Fragment:
        if not args:
            return _NEVER
        parts = [self.lower(arg) for arg in args]
        if len(parts) == 1:
            return parts[0]
        return Fragment("|".join(p.wrapped(Prec.SEQ) for p in parts), Prec.ALT)

    def _group(self, args: list[Form]) -> Fragment:
        return Fragment(f"({self._seq(args).text})", Prec.ATOM)

    # --- repetition ------------------------------------------------------

    def _quantified(self, args: list[Form], suffix: str, greedy: bool | None) -> Fragment:
        if not args:
            raise _unsupported("repetition needs an operand")
        body = self._seq(args).wrapped(Prec.ATOM)
        if greedy is None:
            greedy = self._greedy
        lazy = "" if greedy else "?"
        return Fragment(f"{body}{suffix}{lazy}", Prec.SEQ)

    def _repeat(self, args: list[Form], op: str, greedy: bool | None) -> Fragment:
        return self._quantified(args, op, greedy)

    def _with_greed(self, args: list[Form], greedy: bool) -> Fragment:
        if len(args) != 1:
            raise _unsupported("minimal-match/maximal-match take exactly one form")
        saved = self._greedy
        self._greedy = greedy
        try:
            return self.lower(args[0])
        finally:
            self._greedy = saved

    def _exactly(self, args: list[Form]) -> Fragment:
        if not args:
            raise _unsupported("'=' needs a count")
        n = _count(args[0], "count")
        return self._quantified(args[1:], f"{{{n}}}", True)

    def _at_least(self, args: list[Form]) -> Fragment:
        if not args:
            raise _unsupported("'>=' needs a count")
        n = _count(args[0], "count")
        return self._quantified(args[1:], f"{{{n},}}", True)

    def _between(self, args: list[Form]) -> Fragment:
        if len(args) < 2:
            raise _unsupported("'**' needs a minimum and a maximum")
        low = _count(args[0], "minimum")
        high = _count(args[1], "maximum")
        if high < low:
            raise _unsupported(f"maximum {high} is below minimum {low}")
        return self._quantified(args[2:], f"{{{low},{high}}}", True)

    def _repeat_counted(self, args: list[Form]) -> Fragment:
        if len(args) >= 2 and isinstance(args[1], int):
            return self._between(args)
        return self._exactly(args)

    # --- character classes -----------------------------------------------

    def _class_body(self, args: list[Form]) -> str:
        parts: list[str] = []
        for arg in args:
            if isinstance(arg, Symbol):
                body = _CLASS_BODIES.get(str(arg))
                if body is None:
                    raise _unsupported(f"unknown character class '{arg}'")
                parts.append(body)
            elif isinstance(arg, str):
                parts.append(self._class_string(arg))
            else:
                raise _unsupported(f"cannot use {arg!r} in a character set")
        body = "".join(parts)
        if not body:
            raise _unsupported("empty character set")
        return body

    def _class_string(self, chars: str) -> str:
        out: list[str] = []
        i = 0
        while i < len(chars):
            if i + 2 < len(chars) and chars[i + 1] == "-":
                low, high = chars[i], chars[i + 2]
                if high < low:
                    raise _unsupported(f"invalid range '{low}-{high}'")
                out.append(f"{_escape_class_char(low)}-{_escape_class_char(high)}")
                i += 3
            else:
                out.append(_escape_class_char(chars[i]))
                i += 1
        return "".join(out)

    def _char_class(self, args: list[Form], negated: bool) -> Fragment:
        caret = "^" if negated else ""
        return Fragment(f"[{caret}{self._class_body(args)}]", Prec.ATOM)

    def _not(self, args: list[Form]) -> Fragment:
        if len(args) != 1:
            raise _unsupported("'not' takes exactly one form")
        target = args[0]
        if isinstance(target, Symbol):
            if target == "word-boundary":
                return _ANCHORS["not-word-boundary"]
            return self._char_class([target], negated=True)
        if isinstance(target, str) and len(target) == 1:
            return self._char_class([target], negated=True)
        if isinstance(target, list) and target and isinstance(target[0], Symbol):
            if target[0] in ("any", "in", "char"):
                return self._char_class(target[1:], negated=True)
            if target[0] == "not" and len(target) == 2:
                return self.lower(target[1])
        raise _unsupported(f"cannot negate {target!r}")

    # --- escapes ---------------------------------------------------------

    def _backref(self, args: list[Form]) -> Fragment:
        if len(args) != 1:
            raise _unsupported("'backref' takes exactly one group number")
        n = _count(args[0], "group number")
        if n < 1:
            raise _unsupported("group numbers start at 1")
        return Fragment(f"(?:\\{n})", Prec.ATOM)

    def _raw(self, args: list[Form]) -> Fragment:
        if len(args) != 1 or not isinstance(args[0], str) or isinstance(args[0], Symbol):
            raise _unsupported("'regexp' takes exactly one string")
        return Fragment(f"(?:{args[0]})", Prec.ATOM)

    def _literal_form(self, args: list[Form]) -> Fragment:
        if len(args) != 1 or not isinstance(args[0], str) or isinstance(args[0], Symbol):
            raise _unsupported("'literal' takes exactly one string")
        return _literal(args[0])


def rx_to_regex(forms: list[Form]) -> str:
    """Lower a list of top-level rx forms to a regex string.

    Raises:
        PatternCompileError: If a form is unknown or malformed.
    """
    return RxLowering().lower_all(forms)
