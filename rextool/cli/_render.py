"""Terminal rendering of a buffer's highlights and the match report."""

from __future__ import annotations

import click

from rextool.constants import MATCH_FACE
from rextool.session.buffer import MatchReport, TextBuffer
from rextool.session.controller import Evaluation

# Shown where a zero-length match sits, since there is nothing to color.
ZERO_WIDTH_MARK = "|"


def highlight_text(buffer: TextBuffer, face: str = MATCH_FACE) -> str:
    """Return the buffer text with every span of ``face`` styled."""
    text = buffer.text
    pieces: list[str] = []
    cursor = 0
    for start, end in buffer.spans(face):
        start -= buffer.region_start
        end -= buffer.region_start
        if start < cursor or end > len(text):
            continue
        pieces.append(text[cursor:start])
        if start == end:
            pieces.append(click.style(ZERO_WIDTH_MARK, fg="yellow", bold=True))
        else:
            pieces.append(click.style(text[start:end], fg="black", bg="green"))
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces)


def echo_evaluation(evaluation: Evaluation, buffer: TextBuffer, report: MatchReport) -> None:
    """Print the outcome line, the highlighted text and the report."""
    if evaluation.is_error:
        click.secho(evaluation.summary(), fg="red", err=True)
        for line in report.lines():
            click.echo(line, err=True)
        return

    click.secho(evaluation.summary(), fg="cyan")
    if evaluation.match_set:
        click.echo(highlight_text(buffer))
        click.echo()
        for line in report.lines():
            click.echo(line)


def evaluation_to_dict(evaluation: Evaluation) -> dict:
    """JSON-ready description of an evaluation."""
    compiled = evaluation.compiled
    return {
        "status": evaluation.status.value,
        "pattern": evaluation.inputs.pattern,
        "regex": compiled.regex if compiled is not None else None,
        "frontend": evaluation.inputs.frontend.value,
        "backend": evaluation.inputs.backend.value,
        "matches": evaluation.match_set.to_list(),
        "spans": [[s.start, s.end] for s in evaluation.spans],
        "error": evaluation.error.to_dict() if evaluation.error is not None else None,
    }
