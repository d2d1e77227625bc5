"""
Phase 2 Tests: rx Lowering

Tests that symbolic forms lower to the expected regex text and that the
result means the same thing to Python's engine.
"""

import re

import pytest

from rextool.patterns import read_forms, rx_to_regex
from rextool.types import ErrorCode, PatternCompileError


def lower(source: str) -> str:
    return rx_to_regex(read_forms(source))


class TestLowering:
    """Tests for individual forms."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ('"abc"', "abc"),
            ('"a.b"', r"a\.b"),
            ('(literal "a+b")', r"a\+b"),
            ('(seq "a" (group "b"))', "a(b)"),
            ('(: "a" "b")', "ab"),
            ('(or "ab" "cd")', "ab|cd"),
            ('(seq (or "ab" "cd") "e")', "(?:ab|cd)e"),
            ('(group (or "a" "b"))', "(a|b)"),
            ('(* "a")', "a*"),
            ('(+ "ab")', "(?:ab)+"),
            ('(+ "a" "b")', "(?:ab)+"),
            ('(opt "x")', "x?"),
            ('(? "x")', "x?"),
            ('(*? "a")', "a*?"),
            ('(+? "a")', "a+?"),
            ('(?? "a")', "a??"),
            ('(minimal-match (* "a"))', "a*?"),
            ('(minimal-match (0+ "a"))', "a*"),
            ('(+ digit)', "[0-9]+"),
            ('(= 3 "a")', "a{3}"),
            ('(>= 2 "ab")', "(?:ab){2,}"),
            ('(** 1 3 digit)', "[0-9]{1,3}"),
            ('(repeat 2 "a")', "a{2}"),
            ('(repeat 2 4 "a")', "a{2,4}"),
            ('(* (+ "a"))', "(?:a+)*"),
            ('(any "a-z" ?_)', "[a-z_]"),
            ('(any digit "x")', "[0-9x]"),
            ('(any "]-")', r"[\]\-]"),
            ('(not (any "abc"))', "[^abc]"),
            ("(not digit)", "[^0-9]"),
            ("(not word-boundary)", r"\B"),
            ("(backref 1)", r"(?:\1)"),
            ('(regexp "a|b")', "(?:a|b)"),
            ("(or)", "(?!)"),
            ('(seq bol (group (+ digit)) eol)', "^([0-9]+)$"),
            ("eos", r"(?![\s\S])"),
            ("bos", r"\A"),
            ("anything", r"[\s\S]"),
            ("nonl", "."),
            ('"a" "b"', "ab"),
        ],
    )
    def test_lowers_to(self, source, expected):
        assert lower(source) == expected

    def test_backref_followed_by_digit_stays_unambiguous(self):
        regex = lower('(seq (group "a") (backref 1) "0")')
        assert regex == r"(a)(?:\1)0"
        assert re.fullmatch(regex, "aa0")


class TestLoweredSemantics:
    """Lowered patterns behave as the forms describe."""

    def test_alternation_inside_sequence_is_grouped(self):
        regex = lower('(seq (or "ab" "cd") "e")')
        assert re.fullmatch(regex, "cde")
        assert not re.fullmatch(regex, "ab")

    def test_quantifier_applies_to_whole_string(self):
        regex = lower('(+ "ab")')
        assert re.fullmatch(regex, "ababab")
        assert not re.fullmatch(regex, "abb")

    def test_word_start_and_end(self):
        regex = lower('(seq word-start (+ alpha) word-end)')
        assert re.findall(regex, "ab, cd") == ["ab", "cd"]

    def test_string_end_only_at_absolute_end(self):
        regex = lower('(seq "x" eos)')
        assert re.search(regex, "x\n") is None
        assert re.search(regex, "ax") is not None

    def test_punct_class(self):
        regex = lower("(+ punct)")
        assert re.fullmatch(regex, "!?.,;[]")
        assert not re.fullmatch(regex, "a")


class TestLoweringErrors:
    """Tests for forms that cannot be lowered."""

    @pytest.mark.parametrize(
        "source",
        [
            '(frobnicate "a")',
            "unknown-symbol",
            "()",
            '(1 "a")',
            '(= "a")',
            '(** 3 1 "a")',
            "(*)",
            "(backref 0)",
            "(any)",
            "(any foo)",
            '(any "z-a")',
            "(not nonl)",
            '(minimal-match "a" "b")',
            "(regexp digit)",
            "12",
        ],
    )
    def test_raises_compile_error(self, source):
        with pytest.raises(PatternCompileError) as exc_info:
            lower(source)
        assert exc_info.value.code == ErrorCode.PATTERN_FORM_UNSUPPORTED
