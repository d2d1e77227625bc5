"""Recomputation of matches and highlights on every input change.

The controller owns the current Evaluation, the highlight spans and the
published report. Each change notification runs one synchronous cycle:
clear everything, compile the pattern, dispatch to the selected backend,
then rebuild highlights and report from the new MatchSet. Nothing is diffed,
so running a cycle twice on the same inputs yields the same state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Mapping

from loguru import logger

from rextool.backends import build_backends
from rextool.config import ToolConfig
from rextool.interfaces.backends import (
    BackendKind,
    FrontendKind,
    HighlightSurface,
    MatchBackend,
    ReportSink,
)
from rextool.patterns.compiler import CompiledPattern, PatternCompiler
from rextool.patterns.model import MatchSet
from rextool.types.errors import BackendProcessError
from rextool.utils.logger import with_cycle_id

from .highlights import HighlightManager, HighlightSpan


class ControllerState(Enum):
    """Whether a recomputation cycle is running."""

    IDLE = "idle"
    RECOMPUTING = "recomputing"


class EvaluationStatus(Enum):
    """Outcome of one recomputation cycle."""

    NO_PATTERN = "no_pattern"
    NO_MATCHES = "no_matches"
    MATCHED = "matched"
    BACKEND_ERROR = "backend_error"


@dataclass(frozen=True)
class EvaluationInputs:
    """Snapshot of every input a cycle reads."""

    pattern: str = ""
    frontend: FrontendKind = FrontendKind.RAW
    backend: BackendKind = BackendKind.NATIVE
    text: str = ""
    region_start: int = 0


@dataclass(frozen=True)
class Evaluation:
    """Result of one cycle, replaced wholesale by the next."""

    inputs: EvaluationInputs
    status: EvaluationStatus
    match_set: MatchSet = field(default_factory=MatchSet.empty)
    spans: tuple[HighlightSpan, ...] = ()
    compiled: CompiledPattern | None = None
    error: BackendProcessError | None = None
    cycle_id: str | None = None

    @property
    def is_error(self) -> bool:
        return self.status is EvaluationStatus.BACKEND_ERROR

    def summary(self) -> str:
        """One-line description of the outcome."""
        if self.status is EvaluationStatus.NO_PATTERN:
            return "No pattern"
        if self.status is EvaluationStatus.BACKEND_ERROR:
            return f"Backend error: {self.error.user_message if self.error else 'unknown'}"
        count = len(self.match_set)
        return f"{count} match{'es' if count != 1 else ''}"


class ReevaluationController:
    """Orchestrates compile → match → highlight → report.

    Usage:
        buffer, report = TextBuffer("ab ab"), MatchReport()
        controller = ReevaluationController(buffer, report)
        evaluation = controller.update(pattern="a(b)", text=buffer.text)
        print(evaluation.summary())  # 2 matches
    """

    def __init__(
        self,
        surface: HighlightSurface,
        report: ReportSink,
        backends: Mapping[BackendKind, MatchBackend] | None = None,
        compiler: PatternCompiler | None = None,
        inputs: EvaluationInputs | None = None,
    ):
        """Initialize the controller.

        Args:
            surface: Text region that carries highlight spans.
            report: Sink for the match/group report.
            backends: Backend per kind (defaults from ToolConfig()).
            compiler: Pattern compiler.
            inputs: Initial input snapshot.
        """
        self._highlights = HighlightManager(surface)
        self._report = report
        self._backends = dict(backends) if backends is not None else build_backends(ToolConfig())
        self._compiler = compiler or PatternCompiler()
        self._inputs = inputs or EvaluationInputs()
        self._state = ControllerState.IDLE
        self._pending = False
        self._evaluation = Evaluation(inputs=self._inputs, status=EvaluationStatus.NO_PATTERN)

    @classmethod
    def from_config(
        cls,
        config: ToolConfig,
        surface: HighlightSurface,
        report: ReportSink,
    ) -> "ReevaluationController":
        """Create a controller whose backends and defaults follow ``config``."""
        return cls(
            surface,
            report,
            backends=build_backends(config),
            inputs=EvaluationInputs(backend=config.backend, frontend=config.frontend),
        )

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def inputs(self) -> EvaluationInputs:
        return self._inputs

    @property
    def evaluation(self) -> Evaluation:
        """Result of the last completed cycle."""
        return self._evaluation

    @property
    def spans(self) -> tuple[HighlightSpan, ...]:
        return self._highlights.spans

    def update(self, **changes: object) -> Evaluation:
        """Apply input changes and recompute.

        Args:
            **changes: Any of pattern, frontend, backend, text, region_start.

        Returns:
            The evaluation after the change.
        """
        trigger = ",".join(sorted(changes)) or "refresh"
        return self.notify(replace(self._inputs, **changes), trigger=trigger)

    def refresh(self) -> Evaluation:
        """Recompute with unchanged inputs."""
        return self.notify(self._inputs, trigger="refresh")

    def notify(self, inputs: EvaluationInputs, trigger: str = "change") -> Evaluation:
        """Handle a change notification carrying the current inputs.

        A notification that arrives while a cycle is running only records
        the new inputs; one more cycle runs when the current one finishes.
        """
        self._inputs = inputs
        if self._state is ControllerState.RECOMPUTING:
            logger.debug(f"Change to {trigger} during recomputation, coalescing")
            self._pending = True
            return self._evaluation

        self._state = ControllerState.RECOMPUTING
        try:
            while True:
                self._pending = False
                self._evaluation = self._recompute(self._inputs, trigger)
                if not self._pending:
                    break
                trigger = "coalesced"
        finally:
            self._state = ControllerState.IDLE
        return self._evaluation

    def _recompute(self, inputs: EvaluationInputs, trigger: str) -> Evaluation:
        with with_cycle_id(trigger=trigger) as cycle:
            self._highlights.clear()
            self._report.clear()

            compiled = self._compiler.compile(inputs.pattern, inputs.frontend)
            if compiled is None or compiled.is_empty:
                logger.debug("No effective pattern, nothing to match")
                return Evaluation(
                    inputs=inputs,
                    status=EvaluationStatus.NO_PATTERN,
                    compiled=compiled,
                    cycle_id=cycle.cycle_id,
                )

            backend = self._backends.get(inputs.backend)
            if backend is None:
                raise ValueError(f"No backend configured for {inputs.backend}")

            try:
                match_set = backend.run(compiled, inputs.text)
            except BackendProcessError as e:
                logger.warning(f"{inputs.backend.value} backend failed: {e}")
                self._report.show_error(e)
                return Evaluation(
                    inputs=inputs,
                    status=EvaluationStatus.BACKEND_ERROR,
                    compiled=compiled,
                    error=e,
                    cycle_id=cycle.cycle_id,
                )

            spans = self._highlights.apply(match_set, inputs.region_start)
            self._report.show_matches(match_set.report_entries())
            logger.debug(
                f"{len(match_set)} matches via {inputs.backend.value} "
                f"in {cycle.elapsed_ms:.1f}ms"
            )
            return Evaluation(
                inputs=inputs,
                status=EvaluationStatus.MATCHED if match_set else EvaluationStatus.NO_MATCHES,
                match_set=match_set,
                spans=spans,
                compiled=compiled,
                cycle_id=cycle.cycle_id,
            )
