"""Program generator for the Perl matching backend.

The generated program reads the sample text from its ``__DATA__`` section,
applies the pattern globally in multiline mode and prints one JSON array of
records ``[preceding_length, match_length, [[group_index, value], ...]]``.
Group values that did not participate are ``null``.
"""

from __future__ import annotations

from dataclasses import dataclass

from rextool.constants import EXTERNAL_MAX_GROUP

_PROGRAM_TEMPLATE = """\
use strict;
use warnings;
use JSON::PP;

binmode(DATA, ':encoding(UTF-8)');
my $pattern = {pattern_literal};
my $text = do {{ local $/; <DATA> }};
$text = '' unless defined $text;

my @records;
while ($text =~ /$pattern/{modifiers}) {{
    my $last = $#+ < {max_group} ? $#+ : {max_group};
    my @groups;
    for my $i (1 .. $last) {{
        my $value = defined $-[$i] ? substr($text, $-[$i], $+[$i] - $-[$i]) : undef;
        push @groups, [$i + 0, $value];
    }}
    push @records, [$-[0] + 0, $+[0] - $-[0], \\@groups];
}}
print JSON::PP->new->ascii->encode(\\@records), "\\n";
__DATA__
"""


def perl_string_literal(value: str) -> str:
    """Quote ``value`` as an ASCII-only double-quoted Perl string.

    Non-printable and non-ASCII characters become ``\\x{...}`` escapes so the
    program source needs no encoding pragma.
    """
    out = ['"']
    for ch in value:
        if ch in '\\"$@':
            out.append("\\" + ch)
        elif " " <= ch <= "~":
            out.append(ch)
        else:
            out.append(f"\\x{{{ord(ch):x}}}")
    out.append('"')
    return "".join(out)


@dataclass(frozen=True)
class PerlProgram:
    """A rendered Perl program for one evaluation."""

    pattern: str
    text: str
    ignore_case: bool = False
    max_group: int = EXTERNAL_MAX_GROUP

    @property
    def modifiers(self) -> str:
        return "mgi" if self.ignore_case else "mg"

    def render(self) -> str:
        """Full program source, sample text included."""
        header = _PROGRAM_TEMPLATE.format(
            pattern_literal=perl_string_literal(self.pattern),
            modifiers=self.modifiers,
            max_group=self.max_group,
        )
        return header + self.text

    def encode(self) -> bytes:
        """Program bytes as fed to the process's stdin."""
        return self.render().encode("utf-8")
