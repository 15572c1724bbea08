"""Diagnostic abstractions shared by the registry, the gate and the loader."""

from __future__ import annotations

from collections.abc import Mapping
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
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None and self.debug_enabled:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "contribution_dropped":
        key = data.get("key") or "<unknown>"
        origin = data.get("origin") or "<unknown>"
        reason = data.get("reason")
        suffix = f": {reason}" if reason else ""
        return f"Dropped contribution from '{origin}' for '{key}'{suffix}"

    if name == "gate_flushed":
        count = data.get("count", 0)
        bucket = data.get("bucket")
        label = f" {bucket}" if bucket else ""
        plural = "" if count == 1 else "s"
        return f"Flushed {count} pending{label} contribution{plural}"

    if name == "fragment_loaded":
        key = data.get("key") or "<unknown>"
        accepted = data.get("accepted", 0)
        return f"Loaded {key} ({accepted} accepted)"

    if name == "fragment_skipped":
        path = data.get("path") or "<unknown>"
        reason = data.get("reason") or "unreadable"
        return f"Skipped fragment {path} ({reason})"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
