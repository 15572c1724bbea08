"""Route index diagnostics to the terminal."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from docxref.core.diagnostics import DiagnosticEmitter, format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


# Events that describe lost data; commands summarise them after loading.
SUMMARISED_EVENTS = frozenset({"contribution_dropped", "fragment_skipped"})


class CliEmitter(DiagnosticEmitter):
    """Emitter used while a command loads the documentation build.

    A broken build can drop hundreds of contributions, so per-contribution
    warnings are only printed with ``-v``. The matching events are recorded on
    the CLI state and reported as one line by :func:`summarise_problems`.
    """

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state or get_cli_state()
        self.debug_enabled = self._state.show_tracebacks

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if self._state.verbose:
            emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        if name in SUMMARISED_EVENTS:
            self._state.record_event(name, payload)
            return
        message = format_event_message(name, payload)
        if message:
            render_message("info", message)


def summarise_problems(state: CLIState, *, issues: int = 0) -> None:
    """Print one warning per kind of recorded loading problem."""
    suffix = "" if state.verbose else " Run with -v for details."

    dropped = state.consume_events("contribution_dropped")
    if dropped:
        keys = {event.get("key") for event in dropped}
        emit_warning(
            f"Dropped {len(dropped)} malformed contribution(s) under {len(keys)} key(s).{suffix}"
        )

    skipped = state.consume_events("fragment_skipped")
    if skipped:
        emit_warning(f"{len(skipped)} fragment(s) could not be loaded.{suffix}")

    if issues:
        emit_warning(f"Ignored {issues} undecodable assignment(s).{suffix}")


__all__ = ["SUMMARISED_EVENTS", "CliEmitter", "summarise_problems"]
