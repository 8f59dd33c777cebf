"""Diagnostic abstractions shared by the core resolvers and the CLI.

Core code never prints. It reports through a :class:`DiagnosticEmitter`;
the CLI plugs in a Rich-backed emitter, library users get either silence
(:class:`NullEmitter`) or the standard :mod:`logging` module
(:class:`LoggingEmitter`).

Structured events carry a name and a flat payload:

``container_engine_selected``
    ``name`` and ``path`` of the podman/docker executable.
``main_document_guessed``
    ``document`` (relative path), ``strategy`` and ``candidates`` count.
``run_settings``
    ``engine``, ``image`` and ``build_once``.
``changes_committed``
    ``repository`` and commit ``message``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that ignores every diagnostic."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards diagnostics to :mod:`logging`."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def _log(self, level: int, message: str, exc: BaseException | None) -> None:
        self._logger.log(level, message, exc_info=exc if self.debug_enabled else None)

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self._log(logging.WARNING, message, exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self._log(logging.ERROR, message, exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message is None:
            self._logger.debug("diagnostic event %s: %s", name, dict(payload))
        else:
            self._logger.info(message)


def _container_engine_selected(data: Mapping[str, Any]) -> str:
    path = data.get("path")
    suffix = f" ({path})" if path else ""
    return f"Container engine: {data.get('name') or '<unknown>'}{suffix}"


def _main_document_guessed(data: Mapping[str, Any]) -> str:
    details: list[str] = []
    if data.get("strategy"):
        details.append(str(data["strategy"]))
    if data.get("candidates"):
        details.append(f"{data['candidates']} candidate(s)")
    suffix = f" ({', '.join(details)})" if details else ""
    return f"Main document: {data.get('document') or '<unknown>'}{suffix}"


def _run_settings(data: Mapping[str, Any]) -> str:
    mode = "once" if data.get("build_once") else "watch"
    engine = data.get("engine") or "<unknown>"
    image = data.get("image") or "<unknown>"
    return f"Building with {engine} in {image} ({mode} mode)"


def _changes_committed(data: Mapping[str, Any]) -> str:
    return f"Committed changes in {data.get('repository') or '<unknown>'}"


_EVENT_FORMATTERS: dict[str, Callable[[Mapping[str, Any]], str]] = {
    "container_engine_selected": _container_engine_selected,
    "main_document_guessed": _main_document_guessed,
    "run_settings": _run_settings,
    "changes_committed": _changes_committed,
}


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a one-line summary for known events, ``None`` otherwise."""
    formatter = _EVENT_FORMATTERS.get(name)
    if formatter is None:
        return None
    return formatter(payload)


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
