"""S-expression reader for the symbolic pattern notation.

Reads the textual form of rx expressions into plain Python values:
lists for ``( ... )``, ``str`` for string and character literals, ``int``
for integers and :class:`Symbol` for everything else.

Character literals are written ``?a`` or ``?\\n``. A ``?`` followed by a
delimiter, and the token ``??``, read as symbols so that ``(? "x")`` and
``(?? "x")`` work as operators.
"""

from __future__ import annotations

import re
from typing import Union

from rextool.types.errors import ErrorCode, PatternCompileError


class Symbol(str):
    """A bare symbol such as ``seq`` or ``bol``."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Symbol({str.__repr__(self)})"


Form = Union[Symbol, str, int, list]

_STRING_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "f": "\f",
    "e": "\x1b",
    "s": " ",
    "\\": "\\",
    '"': '"',
}

_DELIMITERS = set("()\";") | {" ", "\t", "\n", "\r", "\f"}

_INTEGER = re.compile(r"-?[0-9]+")


def _syntax_error(message: str, position: int) -> PatternCompileError:
    return PatternCompileError(
        f"{message} at offset {position}",
        code=ErrorCode.PATTERN_SYNTAX_INVALID,
        user_message="Symbolic pattern is not a well-formed expression.",
    )


class _Reader:
    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0

    def read_all(self) -> list[Form]:
        forms: list[Form] = []
        while True:
            self._skip_blank()
            if self._pos >= len(self._source):
                return forms
            forms.append(self._read_form())

    def _skip_blank(self) -> None:
        src = self._source
        while self._pos < len(src):
            ch = src[self._pos]
            if ch.isspace():
                self._pos += 1
            elif ch == ";":
                newline = src.find("\n", self._pos)
                self._pos = len(src) if newline < 0 else newline + 1
            else:
                return

    def _read_form(self) -> Form:
        ch = self._source[self._pos]
        if ch == "(":
            return self._read_list()
        if ch == ")":
            raise _syntax_error("unexpected ')'", self._pos)
        if ch == '"':
            return self._read_string()
        if ch == "?" and self._starts_char_literal():
            return self._read_char()
        return self._read_atom()

    def _starts_char_literal(self) -> bool:
        # a lone "?" or "??" is a symbol (the optional operators)
        nxt = self._source[self._pos + 1 : self._pos + 2]
        return bool(nxt) and nxt not in _DELIMITERS and nxt != "?"

    def _read_list(self) -> list:
        start = self._pos
        self._pos += 1
        items: list[Form] = []
        while True:
            self._skip_blank()
            if self._pos >= len(self._source):
                raise _syntax_error("unterminated list", start)
            if self._source[self._pos] == ")":
                self._pos += 1
                return items
            items.append(self._read_form())

    def _read_string(self) -> str:
        start = self._pos
        self._pos += 1
        out: list[str] = []
        src = self._source
        while self._pos < len(src):
            ch = src[self._pos]
            if ch == '"':
                self._pos += 1
                return "".join(out)
            if ch == "\\":
                if self._pos + 1 >= len(src):
                    break
                esc = src[self._pos + 1]
                # backslash-newline is a line continuation
                if esc != "\n":
                    out.append(_STRING_ESCAPES.get(esc, esc))
                self._pos += 2
                continue
            out.append(ch)
            self._pos += 1
        raise _syntax_error("unterminated string", start)

    def _read_char(self) -> str:
        start = self._pos
        src = self._source
        if self._pos + 1 >= len(src):
            raise _syntax_error("incomplete character literal", start)
        ch = src[self._pos + 1]
        if ch == "\\":
            if self._pos + 2 >= len(src):
                raise _syntax_error("incomplete character literal", start)
            esc = src[self._pos + 2]
            self._pos += 3
            value = _STRING_ESCAPES.get(esc, esc)
        else:
            self._pos += 2
            value = ch
        if self._pos < len(src) and src[self._pos] not in _DELIMITERS:
            raise _syntax_error("invalid character literal", start)
        return value

    def _read_atom(self) -> Symbol | int:
        start = self._pos
        src = self._source
        while self._pos < len(src) and src[self._pos] not in _DELIMITERS:
            self._pos += 1
        token = src[start:self._pos]
        if _INTEGER.fullmatch(token):
            return int(token)
        return Symbol(token)


def read_forms(source: str) -> list[Form]:
    """Read every top-level form in ``source``.

    Raises:
        PatternCompileError: If the text is not well-formed.
    """
    return _Reader(source).read_all()
