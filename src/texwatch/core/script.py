"""Shell scripts executed inside the TeX Live container.

The container receives a single shell string, so every value interpolated from
the host (document path, passthrough arguments, messages) goes through
:func:`shlex.quote`.

Watch mode contract: the source list is rebuilt by ``find`` before every
watch registration. ``entr -d`` leaves when a new file shows up in a watched
directory, and the loop relists so the new file is watched too. Any
replacement watcher must keep this re-enumeration; none is assumed to notice
new files on its own.
"""

from __future__ import annotations

from collections.abc import Sequence
import shlex

from .config import LatexEngine, RunConfig


SOURCE_SUFFIXES: tuple[str, ...] = (".tex", ".cls", ".bib")
LATEXMK_OPTIONS: tuple[str, ...] = ("-interaction=batchmode", "-g", "-synctex=1")
WATCHER_COMMAND: tuple[str, ...] = ("entr", "-d")
DISMISS_MESSAGE = "Press Ctrl-C three times to quit."
WATCH_INTERVAL_SECONDS = 1
STATUS_PREFIX = ">>>"


def build_latexmk_command(
    engine: LatexEngine,
    document: str,
    extra_args: Sequence[str] = (),
) -> list[str]:
    """Construct the latexmk argv for ``document``; extra args come last."""
    return ["latexmk", *LATEXMK_OPTIONS, engine.latexmk_flag, document, *extra_args]


def source_listing_command(suffixes: Sequence[str] = SOURCE_SUFFIXES) -> str:
    """Return a ``find`` invocation listing every watched source file."""
    clauses: list[str] = []
    for suffix in suffixes:
        if clauses:
            clauses.append("-o")
        clauses.extend(["-name", shlex.quote(f"*{suffix}")])
    return " ".join(["find", ".", "-type", "f", r"\(", *clauses, r"\)"])


def _echo(message: str) -> str:
    return f"echo {shlex.quote(f'{STATUS_PREFIX} {message}')}"


def _report_status(document: str) -> str:
    template = f"{STATUS_PREFIX} Finished %s (exit status %s)\\n"
    return f'printf {shlex.quote(template)} {shlex.quote(document)} "$status"'


def build_once_script(latexmk: Sequence[str], document: str) -> str:
    """Run a single build and exit with the build's status."""
    return "; ".join(
        [
            _echo(f"Building {document}"),
            shlex.join(latexmk),
            "status=$?",
            _report_status(document),
            'exit "$status"',
        ]
    )


def build_watch_script(
    latexmk: Sequence[str],
    document: str,
    *,
    suffixes: Sequence[str] = SOURCE_SUFFIXES,
    interval: int = WATCH_INTERVAL_SECONDS,
) -> str:
    """Loop forever: list sources, rebuild on change, relist after each cycle."""
    rebuild = "; ".join(
        [
            _echo(f"Building {document}"),
            shlex.join(latexmk),
            "status=$?",
            _report_status(document),
        ]
    )
    watcher = shlex.join([*WATCHER_COMMAND, "sh", "-c", rebuild])
    body = "; ".join(
        [
            _echo("Watching sources for changes"),
            f"{source_listing_command(suffixes)} | {watcher}",
            _echo(DISMISS_MESSAGE),
            f"sleep {int(interval)}",
        ]
    )
    return f"while true; do {body}; done"


def build_script(config: RunConfig) -> str:
    """Render the in-container script for ``config``."""
    document = config.document_argument
    latexmk = build_latexmk_command(config.engine, document, config.extra_args)
    if config.build_once:
        return build_once_script(latexmk, document)
    return build_watch_script(latexmk, document)


__all__ = [
    "DISMISS_MESSAGE",
    "LATEXMK_OPTIONS",
    "SOURCE_SUFFIXES",
    "build_latexmk_command",
    "build_once_script",
    "build_script",
    "build_watch_script",
    "source_listing_command",
]
