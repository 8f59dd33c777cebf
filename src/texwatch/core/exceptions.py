"""Custom exception hierarchy for the texwatch orchestrator."""

from __future__ import annotations


class TexwatchError(RuntimeError):
    """Base exception for orchestration failures."""

    exit_code: int = 1


class ContainerEngineNotFoundError(TexwatchError):
    """Raised when no supported container engine is available on PATH."""


class ContainerExecutionError(TexwatchError):
    """Raised when the container engine cannot be invoked."""


class MainDocumentNotFoundError(TexwatchError):
    """Raised when no LaTeX document can be found in the project."""


class ConfigurationError(TexwatchError):
    """Raised when the run configuration fails validation."""

    exit_code = 2


class VersionControlError(TexwatchError):
    """Raised when a git command fails."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigurationError",
    "ContainerEngineNotFoundError",
    "ContainerExecutionError",
    "MainDocumentNotFoundError",
    "TexwatchError",
    "VersionControlError",
    "exception_hint",
    "exception_messages",
]
