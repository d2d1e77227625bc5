"""Interactive evaluation session.

Usage:
    from rextool.constants import MATCH_FACE
    from rextool.session import MatchReport, ReevaluationController, TextBuffer

    buffer, report = TextBuffer("ab ab"), MatchReport()
    controller = ReevaluationController(buffer, report)
    controller.update(pattern="a(b)", text=buffer.text)
    print(buffer.spans(MATCH_FACE))  # [(0, 2), (3, 5)]
"""

from .buffer import MatchReport, TextBuffer
from .controller import (
    ControllerState,
    Evaluation,
    EvaluationInputs,
    EvaluationStatus,
    ReevaluationController,
)
from .highlights import HighlightManager, HighlightSpan

__all__ = [
    "ControllerState",
    "Evaluation",
    "EvaluationInputs",
    "EvaluationStatus",
    "HighlightManager",
    "HighlightSpan",
    "MatchReport",
    "ReevaluationController",
    "TextBuffer",
]
