"""Rextool command line interface.

Commands:
- match: evaluate one pattern against a file or stdin
- compile: show the regex a pattern compiles to
- session: interactive loop re-evaluating on every change
"""

from __future__ import annotations

import json

import click

from rextool import __version__
from rextool.config import ToolConfig, parse_enum
from rextool.interfaces.backends import BackendKind, FrontendKind
from rextool.patterns.compiler import PatternCompiler
from rextool.session.buffer import MatchReport, TextBuffer
from rextool.session.controller import EvaluationStatus, ReevaluationController
from rextool.types.errors import ConfigurationError, PatternCompileError
from rextool.utils.logger import configure_logging, logger

from ._render import echo_evaluation, evaluation_to_dict

BACKEND_CHOICE = click.Choice([k.value for k in BackendKind], case_sensitive=False)
FRONTEND_CHOICE = click.Choice([k.value for k in FrontendKind], case_sensitive=False)

EXIT_NO_MATCH = 1
EXIT_BACKEND_ERROR = 2

SESSION_HELP = """\
Type a pattern to evaluate it. Commands:
  :backend native|external   select the matching backend
  :frontend raw|symbolic     select the pattern notation
  :text TEXT                 replace the sample text (\\n for newlines)
  :file PATH                 load the sample text from a file
  :show                      show the current evaluation again
  :help                      show this help
  :quit                      leave the session"""


def _config_with(
    config: ToolConfig,
    backend: str | None,
    frontend: str | None,
    ignore_case: bool | None = None,
) -> ToolConfig:
    return config.with_overrides(
        backend=BackendKind(backend.lower()) if backend else None,
        frontend=FrontendKind(frontend.lower()) if frontend else None,
        ignore_case=ignore_case,
    )


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="Rextool", message="%(prog)s v%(version)s")
@click.option("--debug", is_flag=True, help="Enable debug logging on stderr.")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Rextool - Interactive Regular Expression Testing.

    Evaluate raw or symbolic (rx) patterns against sample text with the
    native Python engine or an external Perl process.
    """
    configure_logging(debug or None)
    try:
        ctx.obj = ToolConfig.from_env()
    except ConfigurationError as e:
        click.echo(e.get_formatted_message(), err=True)
        ctx.exit(1)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("pattern")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--backend", "-b", type=BACKEND_CHOICE, default=None, help="Matching backend.")
@click.option("--frontend", "-f", type=FRONTEND_CHOICE, default=None, help="Pattern notation.")
@click.option("--ignore-case/--match-case", default=None, help="Fold case.")
@click.option("--json", "as_json", is_flag=True, help="Print the evaluation as JSON.")
@click.pass_obj
def match(
    config: ToolConfig,
    pattern: str,
    source,
    backend: str | None,
    frontend: str | None,
    ignore_case: bool | None,
    as_json: bool,
) -> None:
    """Match PATTERN against SOURCE (a file, or stdin).

    Exits 0 when something matched, 1 when nothing did and 2 when the
    backend failed.
    """
    config = _config_with(config, backend, frontend, ignore_case)
    text = source.read()

    buffer = TextBuffer(text)
    report = MatchReport()
    controller = ReevaluationController.from_config(config, buffer, report)
    evaluation = controller.update(pattern=pattern, text=text)

    if as_json:
        click.echo(json.dumps(evaluation_to_dict(evaluation), indent=2))
    else:
        echo_evaluation(evaluation, buffer, report)

    if evaluation.status is EvaluationStatus.BACKEND_ERROR:
        raise SystemExit(EXIT_BACKEND_ERROR)
    if evaluation.status is not EvaluationStatus.MATCHED:
        raise SystemExit(EXIT_NO_MATCH)


@cli.command(name="compile")
@click.argument("expression")
@click.option(
    "--frontend", "-f", type=FRONTEND_CHOICE, default="symbolic", show_default=True,
    help="Notation EXPRESSION is written in.",
)
def compile_command(expression: str, frontend: str) -> None:
    """Print the regex EXPRESSION compiles to."""
    try:
        compiled = PatternCompiler().compile_strict(expression, FrontendKind(frontend.lower()))
    except PatternCompileError as e:
        click.echo(e.get_formatted_message(), err=True)
        raise SystemExit(1)
    click.echo(compiled.regex)


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), required=False)
@click.option("--backend", "-b", type=BACKEND_CHOICE, default=None, help="Matching backend.")
@click.option("--frontend", "-f", type=FRONTEND_CHOICE, default=None, help="Pattern notation.")
@click.pass_obj
def session(config: ToolConfig, source, backend: str | None, frontend: str | None) -> None:
    """Interactive session over the sample text in SOURCE."""
    config = _config_with(config, backend, frontend)
    text = source.read() if source is not None else ""

    buffer = TextBuffer(text)
    report = MatchReport()
    controller = ReevaluationController.from_config(config, buffer, report)
    controller.update(text=text)

    click.echo(SESSION_HELP)
    while True:
        try:
            line = click.prompt(
                f"[{controller.inputs.frontend.value}/{controller.inputs.backend.value}]",
                default="",
                show_default=False,
                prompt_suffix="> ",
            )
        except click.Abort:
            break

        if not line.startswith(":"):
            echo_evaluation(controller.update(pattern=line), buffer, report)
            continue

        command, _, arg = line[1:].partition(" ")
        command = command.strip().lower()
        arg = arg.strip()

        if command in ("quit", "q"):
            break
        if command == "help":
            click.echo(SESSION_HELP)
            continue
        if command == "show":
            echo_evaluation(controller.evaluation, buffer, report)
            continue

        try:
            changes = _session_changes(command, arg)
        except (ConfigurationError, OSError) as e:
            message = e.get_formatted_message() if isinstance(e, ConfigurationError) else str(e)
            click.secho(message, fg="red", err=True)
            continue
        if changes is None:
            click.secho(f"Unknown command ':{command}', try :help", fg="red", err=True)
            continue

        if "text" in changes:
            buffer.text = changes["text"]
        logger.debug(f"Session change: {sorted(changes)}")
        echo_evaluation(controller.update(**changes), buffer, report)


def _session_changes(command: str, arg: str) -> dict | None:
    """Translate a session command into controller input changes."""
    if command == "backend":
        return {"backend": parse_enum(BackendKind, arg, "backend")}
    if command == "frontend":
        return {"frontend": parse_enum(FrontendKind, arg, "frontend")}
    if command == "text":
        return {"text": arg.replace("\\n", "\n")}
    if command == "file":
        with open(arg, encoding="utf-8") as f:
            return {"text": f.read()}
    return None


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
