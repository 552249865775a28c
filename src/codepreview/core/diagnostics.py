"""Diagnostic abstractions shared across the preview pipeline."""

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
        if exc is not None:
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
            if name in _WARNING_EVENTS:
                self._logger.warning(message)
            else:
                self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


_WARNING_EVENTS = frozenset({"unknown_language", "malformed_preview"})


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "unknown_language":
        language = data.get("language") or "<missing>"
        position = data.get("position")
        where = f" at position {position}" if position is not None else ""
        return f"Snippet language '{language}'{where} is not recognised; passing it through."

    if name == "malformed_preview":
        reason = data.get("reason") or "malformed block"
        line = data.get("line")
        suffix = f" (line {line})" if line is not None else ""
        return f"Leaving preview block untouched: {reason}{suffix}"

    if name == "preview_rendered":
        count = int(data.get("fragments") or 0)
        languages = data.get("languages") or []
        noun = "snippet" if count == 1 else "snippets"
        details = f" ({', '.join(languages)})" if languages else ""
        return f"Rendered preview with {count} {noun}{details}"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
