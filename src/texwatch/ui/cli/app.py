"""Typer application wiring for the texwatch CLI."""

from __future__ import annotations

from collections.abc import Sequence

import click
import typer
from typer.core import TyperCommand

from texwatch.adapters.container import INTERRUPTED_EXIT_CODE
from texwatch.ui.cli.commands.watch import watch

from .state import debug_enabled, emit_error, get_cli_state
from .utils import PASSTHROUGH_META_KEY, split_passthrough


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class PassthroughCommand(TyperCommand):
    """Typer command that keeps everything after ``--`` away from the option parser."""

    def parse_args(self, ctx: click.Context, args: Sequence[str]) -> list[str]:  # type: ignore[override]
        options, passthrough = split_passthrough(args)
        ctx.meta[PASSTHROUGH_META_KEY] = passthrough
        return super().parse_args(ctx, options)


app = typer.Typer(
    help="Build LaTeX projects inside a container and rebuild them on change.",
    context_settings=CONTEXT_SETTINGS,
    add_completion=False,
)


app.command(cls=PassthroughCommand, context_settings=CONTEXT_SETTINGS)(watch)


def main() -> None:
    """Console script entry point."""
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.")
        raise SystemExit(INTERRUPTED_EXIT_CODE) from exc
    except Exception as exc:  # pragma: no cover - unexpected failure
        state = get_cli_state()
        if not state.show_tracebacks:
            emit_error(str(exc) or type(exc).__name__, exception=exc)
            raise SystemExit(1) from exc

        from rich.traceback import Traceback

        state.err_console.print(
            Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
        )
        raise SystemExit(1) from exc


__all__ = ["PassthroughCommand", "app", "main"]
