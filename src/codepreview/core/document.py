"""Composition of the inline document shown inside the preview surface."""

from __future__ import annotations

from collections.abc import Sequence

from .config import DEFAULT_RESET_CSS
from .escaping import escape_style
from .fragments import Fragment, Language


DOCUMENT_SHELL = (
    "<!DOCTYPE html>"
    '<html><head><meta charset="utf-8">'
    "<style>{reset_css}</style>"
    "</head><body>{body}</body></html>"
)


def compose_body(fragments: Sequence[Fragment]) -> str:
    """Concatenate wrapped fragments, stylesheets first.

    Within each group the declaration order is preserved, so markup and
    scripts still run in the order the author wrote them.
    """
    ordered = sorted(fragments, key=lambda fragment: fragment.position)
    styles = [fragment.wrapped for fragment in ordered if fragment.language is Language.CSS]
    others = [fragment.wrapped for fragment in ordered if fragment.language is not Language.CSS]
    return "".join(styles + others)


def compose_document(
    fragments: Sequence[Fragment],
    *,
    reset_css: str = DEFAULT_RESET_CSS,
) -> str:
    """Return the full inline document for the given fragments."""
    return DOCUMENT_SHELL.format(
        reset_css=escape_style(reset_css),
        body=compose_body(fragments),
    )


def extract_body(document: str) -> str:
    """Return the body content of a document produced by :func:`compose_document`."""
    start = document.index("<body>") + len("<body>")
    end = document.rindex("</body>")
    return document[start:end]


__all__ = ["DOCUMENT_SHELL", "compose_body", "compose_document", "extract_body"]
