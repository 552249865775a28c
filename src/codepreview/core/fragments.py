"""Fragments collected from a preview block and their per-language wrapping."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
import logging

from .diagnostics import DiagnosticEmitter, NullEmitter
from .escaping import (
    escape_html,
    escape_script,
    escape_style,
    unescape_html,
    unescape_script,
    unescape_style,
)
from .exceptions import CollectorStateError, WrappingError


logger = logging.getLogger(__name__)

DEFAULT_LABEL = "text"


class Language(Enum):
    """Languages a snippet may declare; anything else is passed through."""

    HTML = "html"
    CSS = "css"
    JAVASCRIPT = "javascript"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag: str | None) -> Language:
        """Map a declared language tag onto a variant, defaulting to ``OTHER``."""
        if not tag:
            return cls.OTHER
        try:
            return cls(tag.strip().lower())
        except ValueError:
            return cls.OTHER


_BOILERPLATE: dict[Language, tuple[str, str]] = {
    Language.CSS: ("<style>", "</style>"),
    Language.JAVASCRIPT: ("<script>", "</script>"),
}


def wrap_source(language: Language, body: str) -> str:
    """Return ``body`` wrapped so it runs on its own inside the preview document."""
    match language:
        case Language.CSS:
            opening, closing = _BOILERPLATE[language]
            return f"{opening}{escape_style(body)}{closing}"
        case Language.JAVASCRIPT:
            opening, closing = _BOILERPLATE[language]
            return f"{opening}{escape_script(body)}{closing}"
        case Language.HTML:
            return body
        case Language.OTHER:
            return escape_html(body)


def unwrap_source(language: Language, wrapped: str) -> str:
    """Strip the boilerplate added by :func:`wrap_source` and return the body.

    Stylesheets and scripts that already spell their end tag as ``<\\/style``
    or ``<\\/script`` come back with the plain ``</`` form, which the browser
    treats the same way. :attr:`Fragment.source` keeps the exact text.
    """
    match language:
        case Language.CSS | Language.JAVASCRIPT:
            opening, closing = _BOILERPLATE[language]
            if not (wrapped.startswith(opening) and wrapped.endswith(closing)):
                raise WrappingError(
                    f"Wrapped {language.value} source is missing its {opening} boilerplate."
                )
            inner = wrapped[len(opening) : len(wrapped) - len(closing)]
            if language is Language.CSS:
                return unescape_style(inner)
            return unescape_script(inner)
        case Language.HTML:
            return wrapped
        case Language.OTHER:
            return unescape_html(wrapped)


def trim_source(body: str) -> str:
    """Drop leading and trailing newline characters, keeping indentation."""
    return body.strip("\r\n")


@dataclass(frozen=True, slots=True)
class Fragment:
    """A labelled snippet declared inside a preview block."""

    position: int
    language: Language
    label: str
    source: str

    @property
    def wrapped(self) -> str:
        return wrap_source(self.language, self.source)


@dataclass(slots=True)
class FragmentCollector:
    """Accumulate fragments for a single preview block in document order.

    The collector starts in the collecting state. :meth:`close` hands the
    fragments over for rendering and makes the collector read-only.
    """

    emitter: DiagnosticEmitter = field(default_factory=NullEmitter)
    _fragments: list[Fragment] = field(default_factory=list, init=False)
    _closed: bool = field(default=False, init=False)

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._fragments)

    def add(self, language_tag: str | None, body: str) -> Fragment:
        """Register a snippet at the next available position."""
        if self._closed:
            raise CollectorStateError("Cannot add fragments to a closed collector.")

        language = Language.from_tag(language_tag)
        label = (language_tag or "").strip().lower() or DEFAULT_LABEL
        if language is Language.OTHER:
            self.emitter.event(
                "unknown_language",
                {"language": label, "position": len(self._fragments)},
            )

        fragment = Fragment(
            position=len(self._fragments),
            language=language,
            label=label,
            source=trim_source(body),
        )
        self._fragments.append(fragment)
        logger.debug("Collected %s fragment at position %d", label, fragment.position)
        return fragment

    def close(self) -> tuple[Fragment, ...]:
        """Stop collecting and return the fragments in ascending position."""
        if self._closed:
            raise CollectorStateError("Fragment collector has already been consumed.")
        self._closed = True
        return tuple(sorted(self._fragments, key=lambda fragment: fragment.position))


def collect_fragments(
    declarations: Iterable[tuple[str | None, str]],
    *,
    emitter: DiagnosticEmitter | None = None,
) -> tuple[Fragment, ...]:
    """Build fragments from ``(language_tag, body)`` pairs in one pass."""
    collector = FragmentCollector(emitter=emitter or NullEmitter())
    for language_tag, body in declarations:
        collector.add(language_tag, body)
    return collector.close()


__all__ = [
    "DEFAULT_LABEL",
    "Fragment",
    "FragmentCollector",
    "Language",
    "collect_fragments",
    "trim_source",
    "unwrap_source",
    "wrap_source",
]
