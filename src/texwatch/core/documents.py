"""Heuristics locating the root LaTeX document of a project.

The guess is only a convenience: a project holding several candidate documents
without an obvious ``main*.tex`` naming will be guessed incorrectly, and the
user is expected to pass the document explicitly with ``-m``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import MainDocumentNotFoundError


MAIN_DOCUMENT_PATTERN = "main*.tex"
TEX_SUFFIX_PATTERN = "*.tex"


@dataclass(slots=True)
class DocumentGuess:
    """Outcome of the main document heuristic."""

    path: Path
    strategy: str
    candidates: int


def _relative(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def find_main_candidates(project_dir: Path) -> list[Path]:
    """Return every ``main*.tex`` file below ``project_dir`` in a stable order."""
    matches = [path for path in project_dir.rglob(MAIN_DOCUMENT_PATTERN) if path.is_file()]
    return sorted(matches, key=lambda path: _relative(path, project_dir))


def find_root_tex_files(project_dir: Path) -> list[Path]:
    """Return the ``*.tex`` files directly inside ``project_dir``."""
    matches = [path for path in project_dir.glob(TEX_SUFFIX_PATTERN) if path.is_file()]
    return sorted(matches, key=lambda path: path.name)


def guess_main_document(project_dir: Path) -> DocumentGuess:
    """Pick the most plausible root document without reporting it."""
    candidates = find_main_candidates(project_dir)
    if candidates:
        # min() keeps the first of equally short paths, so ties follow search order.
        chosen = min(candidates, key=lambda path: len(_relative(path, project_dir)))
        return DocumentGuess(path=chosen, strategy="main*.tex", candidates=len(candidates))

    root_files = find_root_tex_files(project_dir)
    if root_files:
        return DocumentGuess(path=root_files[0], strategy="*.tex", candidates=len(root_files))

    raise MainDocumentNotFoundError(f"No .tex files found in '{project_dir}'.")


def resolve_main_document_guess(
    project_dir: Path,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> Path:
    """Guess the main document and warn the user about the choice."""
    emitter = emitter or NullEmitter()
    guess = guess_main_document(project_dir)
    relative = _relative(guess.path, project_dir)
    emitter.warning(f"No main document given, guessing '{relative}'. Use -m FILE to override.")
    emitter.event(
        "main_document_guessed",
        {"document": relative, "strategy": guess.strategy, "candidates": guess.candidates},
    )
    return guess.path


__all__ = [
    "MAIN_DOCUMENT_PATTERN",
    "DocumentGuess",
    "find_main_candidates",
    "find_root_tex_files",
    "guess_main_document",
    "resolve_main_document_guess",
]
