"""Fixtures for Phase 4 session tests.

Controllers run against the real native backend and a TextBuffer. The
external backend points at a missing executable so its failure path runs
without Perl installed.
"""

import sys

import pytest

from rextool.backends import ExternalBackend, NativeBackend
from rextool.interfaces.backends import BackendKind
from rextool.session import MatchReport, ReevaluationController, TextBuffer

MISSING_PERL = ["/nonexistent/rextool-perl", "-"]

# Stand-in engine that drains the program and prints something other than JSON.
GARBLED_ENGINE = [
    sys.executable,
    "-c",
    "import sys; sys.stdin.buffer.read(); print('not json')",
]


@pytest.fixture
def buffer() -> TextBuffer:
    return TextBuffer("ab ab")


@pytest.fixture
def report() -> MatchReport:
    return MatchReport()


@pytest.fixture
def backends() -> dict:
    return {
        BackendKind.NATIVE: NativeBackend(),
        BackendKind.EXTERNAL: ExternalBackend(command=MISSING_PERL),
    }


@pytest.fixture
def garbled_backends() -> dict:
    return {
        BackendKind.NATIVE: NativeBackend(),
        BackendKind.EXTERNAL: ExternalBackend(command=GARBLED_ENGINE),
    }


@pytest.fixture
def controller(buffer, report, backends) -> ReevaluationController:
    controller = ReevaluationController(buffer, report, backends=backends)
    controller.update(text=buffer.text)
    return controller
