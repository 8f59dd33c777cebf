"""Minimal git helpers backing the commit-on-exit hook."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from pathlib import Path
import shutil
import subprocess

from texwatch.core.exceptions import VersionControlError


logger = logging.getLogger(__name__)

COMMIT_MESSAGE = "[texwatch] auto-commit on exit"


def _git_executable() -> str:
    executable = shutil.which("git")
    if executable is None:
        raise VersionControlError("git is required for --commit but was not found on PATH.")
    return executable


def _run_git(repo: Path, args: Sequence[str]) -> subprocess.CompletedProcess[str]:
    command = [_git_executable(), "-C", str(repo), *args]
    logger.debug("running %s", " ".join(command))
    try:
        return subprocess.run(command, check=False, capture_output=True, text=True)
    except OSError as exc:
        raise VersionControlError(f"Failed to invoke git: {exc}") from exc


def is_work_tree(path: Path) -> bool:
    """Return True when ``path`` lies inside a git work tree."""
    result = _run_git(path, ["rev-parse", "--is-inside-work-tree"])
    return result.returncode == 0 and result.stdout.strip() == "true"


def _check(result: subprocess.CompletedProcess[str], action: str) -> None:
    if result.returncode == 0:
        return
    detail = (result.stderr or result.stdout or "").strip()
    text = f"git {action} exited with status {result.returncode}"
    if detail:
        text = f"{text}: {detail}"
    raise VersionControlError(text)


def commit_changes(repo: Path, message: str = COMMIT_MESSAGE) -> bool:
    """Stage modifications of tracked files and commit them.

    Returns False without committing when no tracked file changed.
    """
    _check(_run_git(repo, ["add", "--update"]), "add")
    staged = _run_git(repo, ["diff", "--cached", "--quiet"])
    if staged.returncode == 0:
        logger.debug("nothing to commit in %s", repo)
        return False
    if staged.returncode != 1:
        _check(staged, "diff")
    _check(_run_git(repo, ["commit", "--message", message]), "commit")
    return True


__all__ = ["COMMIT_MESSAGE", "commit_changes", "is_work_tree"]
