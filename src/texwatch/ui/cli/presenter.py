"""Rich-aware presenters for CLI output and diagnostics."""

from __future__ import annotations

from collections.abc import Sequence
import shlex
from typing import TYPE_CHECKING

import typer

from texwatch.api.service import PreparedRun

from .state import CLIState


if TYPE_CHECKING:  # pragma: no cover - typing only
    from rich.console import Console


def _get_console(state: CLIState) -> Console | None:
    """Return the stderr Rich console when it writes to a terminal."""
    console = state.err_console
    if getattr(console, "is_terminal", False):
        return console
    return None


def _summary_rows(prepared: PreparedRun) -> list[tuple[str, str]]:
    config = prepared.config
    rows = [
        ("Runtime", f"{prepared.engine.name} ({prepared.engine.executable})"),
        ("Image", config.image),
        ("Engine", f"{config.engine.value} ({config.engine.latexmk_flag})"),
        ("Main document", config.document_argument),
        ("Project", f"{config.project_dir} -> {config.container_dir}"),
        ("Mode", "once" if config.build_once else "watch"),
    ]
    if config.extra_args:
        rows.append(("Extra arguments", shlex.join(config.extra_args)))
    if config.commit_on_exit:
        rows.append(("Commit on exit", "yes"))
    return rows


def _render_rows(state: CLIState, title: str, rows: Sequence[tuple[str, str]]) -> None:
    console = _get_console(state)
    if console is not None:
        from rich import box
        from rich.table import Table

        table = Table(title=title or None, box=box.SQUARE, header_style="bold cyan")
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        for label, value in rows:
            table.add_row(label, value)
        console.print(table)
        return

    # Plain-text fallback
    if title:
        typer.echo(title, err=True)
    for label, value in rows:
        typer.echo(f"  * {label}: {value}", err=True)


def present_run_summary(state: CLIState, prepared: PreparedRun) -> None:
    """Describe the resolved run before the container takes over the terminal."""
    _render_rows(state, "texwatch", _summary_rows(prepared))


def present_dry_run(state: CLIState, prepared: PreparedRun) -> None:
    """Print the container command that would be executed."""
    if state.verbosity >= 1:
        present_run_summary(state, prepared)
    typer.echo(shlex.join(prepared.command))


def consume_event_diagnostics(state: CLIState) -> list[str]:
    """Summarise recorded events for verbose runs."""
    if state.verbosity < 2 or not state.events:
        state.events.clear()
        return []

    output_lines: list[str] = []
    for event in state.events.get("main_document_guessed", []):
        document = event.get("document", "")
        strategy = event.get("strategy", "unknown")
        candidates = event.get("candidates", 0)
        output_lines.append(f"Guessed {document} via {strategy} among {candidates} candidate(s)")

    state.events.clear()
    return output_lines


__all__ = [
    "consume_event_diagnostics",
    "present_dry_run",
    "present_run_summary",
]
