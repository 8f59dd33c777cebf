"""Implementation of the `texwatch` command."""

from __future__ import annotations

from pathlib import Path

import typer

from texwatch.api.service import WatchRequest, WatchService
from texwatch.core.exceptions import ConfigurationError, TexwatchError

from .._options import (
    CommitOption,
    DebugOption,
    DryRunOption,
    EngineOption,
    ImageOption,
    MainDocumentOption,
    NoConfigOption,
    OnceOption,
    ProjectDirArgument,
    RuntimeOption,
    VerboseOption,
    VersionOption,
)
from ..diagnostics import CliEmitter
from ..presenter import consume_event_diagnostics, present_dry_run, present_run_summary
from ..state import debug_enabled, emit_error, set_cli_state
from ..utils import passthrough_args


_SERVICE = WatchService()


def _fail(exc: TexwatchError) -> typer.Exit:
    if debug_enabled():
        raise exc
    emit_error(str(exc), exception=exc)
    return typer.Exit(code=exc.exit_code)


def watch(
    ctx: typer.Context,
    project_dir: ProjectDirArgument = Path("."),
    main_document: MainDocumentOption = None,
    engine: EngineOption = None,
    image: ImageOption = None,
    commit: CommitOption = None,
    once: OnceOption = False,
    runtime: RuntimeOption = None,
    no_config: NoConfigOption = False,
    dry_run: DryRunOption = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
    version: VersionOption = False,
) -> None:
    """Build a LaTeX project in a container and rebuild it whenever a source changes.

    Arguments following `--` are appended verbatim to the latexmk invocation.
    """
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)
    emitter = CliEmitter(state=state)

    request = WatchRequest(
        project_dir=project_dir,
        main_document=main_document,
        engine=engine,
        image=image,
        commit_on_exit=commit,
        build_once=once,
        extra_args=tuple(passthrough_args(ctx)),
        runtime=runtime,
        use_project_defaults=not no_config,
        emitter=emitter,
    )

    try:
        prepared = _SERVICE.prepare(request)
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except TexwatchError as exc:
        raise _fail(exc) from exc

    for line in consume_event_diagnostics(state):
        typer.echo(line, err=True)

    if dry_run:
        present_dry_run(state, prepared)
        return

    if state.verbosity >= 1:
        present_run_summary(state, prepared)

    try:
        status = _SERVICE.execute(prepared)
    except TexwatchError as exc:
        raise _fail(exc) from exc

    if status != 0:
        raise typer.Exit(code=status)
