"""Route service diagnostics to the terminal."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from texwatch.core.diagnostics import DiagnosticEmitter, format_event_message

from .state import CLIState, emit_error, emit_info, emit_warning, get_cli_state


class CliEmitter(DiagnosticEmitter):
    """Emitter printing through the CLI state consoles.

    Events are recorded on the state so presenters can summarise them once
    the run has been prepared; known events are also echoed in verbose mode.
    """

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state or get_cli_state()

    @property
    def debug_enabled(self) -> bool:
        return self._state.show_tracebacks

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self._state.record_event(name, payload)
        message = format_event_message(name, payload)
        if message is not None:
            emit_info(message)


__all__ = ["CliEmitter"]
