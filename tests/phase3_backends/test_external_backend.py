"""
Phase 3 Tests: External Backend

Tests for the Perl backend:
- Program rendering and string quoting
- Output parsing and validation
- Process failures, using small Python programs in place of Perl
- Real Perl runs, when an interpreter is available
"""

import shutil
import sys

import pytest

from rextool.backends import ExternalBackend, PerlProgram, parse_records, perl_string_literal
from rextool.interfaces.backends import BackendKind
from rextool.patterns import CompiledPattern
from rextool.types import BackendProcessError, ErrorCode

requires_perl = pytest.mark.skipif(shutil.which("perl") is None, reason="perl not installed")


def fake_engine(source: str) -> list[str]:
    """Command that drains stdin and then runs ``source`` as Python."""
    return [sys.executable, "-c", "import sys; sys.stdin.buffer.read()\n" + source]


def pattern(regex: str) -> CompiledPattern:
    return CompiledPattern(regex, regex)


class TestPerlProgram:
    """Tests for program generation."""

    def test_string_literal_escapes_interpolation(self):
        assert perl_string_literal(r"\d$x@y") == r'"\\d\$x\@y"'

    def test_string_literal_escapes_quotes(self):
        assert perl_string_literal('a"b') == r'"a\"b"'

    def test_string_literal_is_ascii(self):
        assert perl_string_literal("é\n") == r'"\x{e9}\x{a}"'

    def test_render_embeds_pattern_and_text(self):
        program = PerlProgram(pattern="a(b)", text="ab ab\n")
        source = program.render()
        assert 'my $pattern = "a(b)";' in source
        assert "/$pattern/mg)" in source
        assert source.endswith("__DATA__\nab ab\n")

    def test_ignore_case_modifier(self):
        assert PerlProgram(pattern="a", text="", ignore_case=True).modifiers == "mgi"
        assert PerlProgram(pattern="a", text="").modifiers == "mg"

    def test_group_limit_in_program(self):
        source = PerlProgram(pattern="a", text="", max_group=20).render()
        assert "$#+ < 20 ? $#+ : 20" in source

    def test_encode_is_utf8(self):
        assert PerlProgram(pattern="a", text="é").encode().endswith("é".encode("utf-8"))


class TestParseRecords:
    """Tests for normalizing engine output."""

    def test_records_to_matches(self):
        matches = parse_records('[[0, 2, [[1, "b"]]], [3, 2, [[1, "b"]]]]', "ab ab")
        assert [(m.start, m.end) for m in matches] == [(0, 2), (3, 5)]
        assert matches[1].groups == {0: "ab", 1: "b"}

    def test_start_is_preceding_length(self):
        # no offset correction is applied to the preceding length
        (match,) = parse_records("[[4, 1, []]]", "abcde")
        assert match.start == 4
        assert match.text == "e"

    def test_null_group(self):
        (match,) = parse_records('[[0, 1, [[1, null], [2, "b"]]]]', "b")
        assert match.groups == {0: "b", 1: None, 2: "b"}

    def test_zero_length_record(self):
        (match,) = parse_records("[[2, 0, []]]", "ab")
        assert (match.start, match.end, match.text) == (2, 2, "")

    def test_empty_output_list(self):
        assert len(parse_records("[]\n", "ab")) == 0

    @pytest.mark.parametrize(
        "output",
        [
            "not json",
            "",
            "{}",
            "[[0, 2]]",
            '[["0", 2, []]]',
            "[[-1, 1, []]]",
            "[[0, 9, []]]",
            "[[0, 1, [[1]]]]",
            "[[0, 1, [[1, 2]]]]",
            "[[0, 2, []], [1, 1, []]]",
        ],
    )
    def test_malformed_output_raises(self, output):
        with pytest.raises(BackendProcessError) as exc_info:
            parse_records(output, "ab")
        assert exc_info.value.code == ErrorCode.BACKEND_OUTPUT_MALFORMED


class TestExternalProcess:
    """Tests for process handling with stand-in engines."""

    def test_kind(self):
        assert ExternalBackend().kind is BackendKind.EXTERNAL

    def test_rejects_empty_command(self):
        with pytest.raises(ValueError):
            ExternalBackend(command=())

    def test_reads_engine_output(self):
        backend = ExternalBackend(command=fake_engine("print('[[0, 2, [[1, \"b\"]]]]')"))
        (match,) = backend.run(pattern("a(b)"), "ab ab")
        assert match.groups == {0: "ab", 1: "b"}

    def test_program_is_sent_on_stdin(self, tmp_path):
        capture = tmp_path / "program.pl"
        backend = ExternalBackend(
            command=[
                sys.executable,
                "-c",
                "import sys; open(sys.argv[1], 'wb').write(sys.stdin.buffer.read()); print('[]')",
                str(capture),
            ]
        )
        backend.run(pattern("x+"), "xx yy")
        program = capture.read_text(encoding="utf-8")
        assert 'my $pattern = "x+";' in program
        assert program.endswith("__DATA__\nxx yy")

    def test_empty_pattern_skips_process(self):
        backend = ExternalBackend(command=["/nonexistent/rextool-perl", "-"])
        assert len(backend.run(pattern(""), "ab")) == 0

    def test_missing_executable(self):
        backend = ExternalBackend(command=["/nonexistent/rextool-perl", "-"])
        assert not backend.is_available()
        with pytest.raises(BackendProcessError) as exc_info:
            backend.run(pattern("a"), "a")
        err = exc_info.value
        assert err.code == ErrorCode.BACKEND_UNAVAILABLE
        assert err.context.backend == "external"
        assert err.recovery_actions

    def test_nonzero_exit(self):
        backend = ExternalBackend(
            command=fake_engine("sys.stderr.write('boom'); sys.exit(3)")
        )
        with pytest.raises(BackendProcessError) as exc_info:
            backend.run(pattern("a"), "a")
        err = exc_info.value
        assert err.code == ErrorCode.BACKEND_EXIT_FAILED
        assert err.stderr == "boom"
        assert err.context.additional_info["returncode"] == 3

    def test_timeout(self):
        backend = ExternalBackend(
            command=fake_engine("import time; time.sleep(10)"),
            timeout=0.5,
        )
        with pytest.raises(BackendProcessError) as exc_info:
            backend.run(pattern("a"), "a")
        assert exc_info.value.code == ErrorCode.BACKEND_TIMEOUT

    def test_non_json_output(self):
        backend = ExternalBackend(command=fake_engine("print('not json')"))
        with pytest.raises(BackendProcessError) as exc_info:
            backend.run(pattern("a"), "a")
        assert exc_info.value.code == ErrorCode.BACKEND_OUTPUT_MALFORMED

    def test_unencodable_text_is_rejected_before_spawning(self):
        backend = ExternalBackend(command=["/nonexistent/rextool-perl", "-"])
        with pytest.raises(BackendProcessError) as exc_info:
            backend.run(pattern("a"), "a\ud800")
        err = exc_info.value
        assert err.code == ErrorCode.BACKEND_INPUT_UNENCODABLE
        assert err.context.operation == "encode"
        assert isinstance(err.original_error, UnicodeEncodeError)

    def test_non_utf8_output(self):
        backend = ExternalBackend(command=fake_engine("sys.stdout.buffer.write(b'\\xff')"))
        with pytest.raises(BackendProcessError) as exc_info:
            backend.run(pattern("a"), "a")
        assert exc_info.value.code == ErrorCode.BACKEND_OUTPUT_MALFORMED


@requires_perl
class TestPerlEngine:
    """Tests against a real Perl interpreter."""

    @pytest.fixture
    def backend(self):
        return ExternalBackend()

    def test_available(self, backend):
        assert backend.is_available()

    def test_matches_with_group(self, backend):
        matches = backend.run(pattern("a(b)"), "ab ab")
        assert [(m.start, m.end) for m in matches] == [(0, 2), (3, 5)]
        assert matches[0].groups == {0: "ab", 1: "b"}

    def test_multiline_anchors(self, backend):
        assert [m.start for m in backend.run(pattern("^"), "ab\ncd")] == [0, 3]
        assert [m.start for m in backend.run(pattern("$"), "ab\ncd")] == [2, 5]

    def test_unmatched_group(self, backend):
        (match,) = backend.run(pattern("(a)|(b)"), "b")
        assert match.groups == {0: "b", 1: None, 2: "b"}

    def test_character_offsets(self, backend):
        (match,) = backend.run(pattern("(b)"), "éb")
        assert (match.start, match.end) == (1, 2)

    def test_interpolation_characters_are_literal(self, backend):
        (match,) = backend.run(pattern(r"\$x"), "a $x")
        assert (match.start, match.end) == (2, 4)

    def test_ignore_case(self):
        matches = ExternalBackend(ignore_case=True).run(pattern("ab"), "AB ab")
        assert len(matches) == 2

    def test_group_limit(self, backend):
        (match,) = backend.run(pattern("(a)" * 22), "a" * 22)
        assert list(match.groups) == list(range(21))

    def test_invalid_pattern_is_an_error(self, backend):
        with pytest.raises(BackendProcessError) as exc_info:
            backend.run(pattern("("), "ab")
        assert exc_info.value.code == ErrorCode.BACKEND_EXIT_FAILED
        assert exc_info.value.stderr
