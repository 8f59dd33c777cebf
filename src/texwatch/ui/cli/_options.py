"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import click
import typer

from texwatch.adapters.container import CONTAINER_ENGINES
from texwatch.core.config import DEFAULT_IMAGE, PROJECT_DEFAULTS_FILENAME, LatexEngine
from texwatch.version import get_version


BUILD_PANEL = "Build"
CONTAINER_PANEL = "Container"
DIAGNOSTICS_PANEL = "Diagnostics"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit()


ProjectDirArgument = Annotated[
    Path,
    typer.Argument(
        metavar="PROJECT_DIR",
        help="LaTeX project directory mounted into the container.",
        exists=True,
        file_okay=False,
        dir_okay=True,
        show_default=True,
    ),
]

MainDocumentOption = Annotated[
    Path | None,
    typer.Option(
        "--main",
        "-m",
        metavar="FILE",
        help=(
            "Main document to build, relative to the project directory or the current "
            "one. Guessed from main*.tex when omitted."
        ),
        rich_help_panel=BUILD_PANEL,
    ),
]

EngineOption = Annotated[
    LatexEngine | None,
    typer.Option(
        "--engine",
        "-e",
        help="LaTeX engine driven by latexmk [default: pdflatex].",
        case_sensitive=False,
        rich_help_panel=BUILD_PANEL,
    ),
]

OnceOption = Annotated[
    bool,
    typer.Option(
        "--once",
        "-1",
        help="Build once and exit instead of watching for changes.",
        rich_help_panel=BUILD_PANEL,
    ),
]

CommitOption = Annotated[
    bool | None,
    typer.Option(
        "--commit/--no-commit",
        "-c",
        help="Commit changes to tracked files when the container exits "
        f"[default: from {PROJECT_DEFAULTS_FILENAME}, else off].",
        show_default=False,
        rich_help_panel=BUILD_PANEL,
    ),
]

ImageOption = Annotated[
    str | None,
    typer.Option(
        "--image",
        "-i",
        metavar="IMAGE",
        help=f"Container image providing TeX Live, latexmk and entr [default: {DEFAULT_IMAGE}].",
        rich_help_panel=CONTAINER_PANEL,
    ),
]

RuntimeOption = Annotated[
    str | None,
    typer.Option(
        "--runtime",
        help="Container engine to use instead of the first one found on PATH.",
        click_type=click.Choice(CONTAINER_ENGINES),
        rich_help_panel=CONTAINER_PANEL,
    ),
]

NoConfigOption = Annotated[
    bool,
    typer.Option(
        "--no-config",
        help=f"Ignore the project's {PROJECT_DEFAULTS_FILENAME} file.",
        rich_help_panel=CONTAINER_PANEL,
    ),
]

DryRunOption = Annotated[
    bool,
    typer.Option(
        "--dry-run",
        help="Print the container command and exit without launching it.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

VersionOption = Annotated[
    bool,
    typer.Option(
        "--version",
        help="Show the texwatch version and exit.",
        callback=_version_callback,
        is_eager=True,
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
