"""Custom exception hierarchy for the code preview pipeline."""

from __future__ import annotations


class PreviewError(RuntimeError):
    """Base exception for code preview failures."""


class ConfigurationError(PreviewError):
    """Raised when a preview configuration cannot be loaded or validated."""


class CollectorStateError(PreviewError):
    """Raised when a fragment collector is used after it has been closed."""


class WrappingError(PreviewError):
    """Raised when wrapped source does not carry the expected boilerplate."""


class PreviewRenderingError(PreviewError):
    """Raised when the preview templates fail to render."""


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
    "CollectorStateError",
    "ConfigurationError",
    "PreviewError",
    "PreviewRenderingError",
    "WrappingError",
    "exception_hint",
    "exception_messages",
]
