"""Context-specific escaping helpers for the composed preview document.

Each context gets a pure escape function and its inverse:

`escape_html`
: Text content. Escapes ``&``, ``<`` and ``>``.

`escape_attribute`
: Double- or single-quoted attribute values. Escapes ``&``, ``<``, ``>``,
  ``"`` and ``'``, and writes carriage returns as ``&#13;`` so the browser
  decodes the value back to the exact input instead of normalising newlines.

`escape_style`
: Body of a ``<style>`` element. Only the ``</style`` end-tag sequence can
  terminate the element early, so it is rewritten as ``<\\/style``.

`escape_script`
: Body of a ``<script>`` element. Rewrites ``</script`` and ``<!--`` which
  would otherwise close the element or switch the tokenizer state.

For every context, ``unescape_x(escape_x(s)) == s`` holds as long as ``s``
does not already contain one of the rewritten sequences.
"""

from __future__ import annotations

from html import escape, unescape
import re


_STYLE_END_RE = re.compile(r"</(style)", re.IGNORECASE)
_STYLE_ESCAPED_RE = re.compile(r"<\\/(style)", re.IGNORECASE)
_SCRIPT_END_RE = re.compile(r"</(script)", re.IGNORECASE)
_SCRIPT_ESCAPED_RE = re.compile(r"<\\/(script)", re.IGNORECASE)
_SCRIPT_COMMENT = "<!--"
_SCRIPT_COMMENT_ESCAPED = "<\\!--"


def escape_html(text: str) -> str:
    """Escape text content so it is never interpreted as markup."""
    return escape(text, quote=False)


def unescape_html(text: str) -> str:
    """Reverse :func:`escape_html`."""
    return unescape(text)


def escape_attribute(text: str) -> str:
    """Escape a value for inclusion inside a quoted HTML attribute."""
    return escape(text, quote=True).replace("\r", "&#13;")


def unescape_attribute(text: str) -> str:
    """Decode an attribute value the way a browser would."""
    return unescape(text)


def escape_style(text: str) -> str:
    """Neutralise ``</style`` sequences inside stylesheet content."""
    return _STYLE_END_RE.sub(r"<\\/\1", text)


def unescape_style(text: str) -> str:
    """Reverse :func:`escape_style`."""
    return _STYLE_ESCAPED_RE.sub(r"</\1", text)


def escape_script(text: str) -> str:
    """Neutralise ``</script`` and ``<!--`` sequences inside script content."""
    text = text.replace(_SCRIPT_COMMENT, _SCRIPT_COMMENT_ESCAPED)
    return _SCRIPT_END_RE.sub(r"<\\/\1", text)


def unescape_script(text: str) -> str:
    """Reverse :func:`escape_script`."""
    text = _SCRIPT_ESCAPED_RE.sub(r"</\1", text)
    return text.replace(_SCRIPT_COMMENT_ESCAPED, _SCRIPT_COMMENT)


__all__ = [
    "escape_attribute",
    "escape_html",
    "escape_script",
    "escape_style",
    "unescape_attribute",
    "unescape_html",
    "unescape_script",
    "unescape_style",
]
