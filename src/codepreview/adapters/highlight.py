"""Pygments integration helpers for the source listings."""

from __future__ import annotations

import logging

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound


logger = logging.getLogger(__name__)


class PygmentsHtmlHighlighter:
    """Convert source code to highlighted HTML using Pygments."""

    def __init__(
        self,
        *,
        style: str = "default",
        cssclass: str = "highlight",
        linenos: bool = False,
    ) -> None:
        self.style = style
        self.cssclass = cssclass
        self.linenos = linenos

    def _formatter(self) -> HtmlFormatter:
        try:
            return HtmlFormatter(
                style=self.style,
                cssclass=self.cssclass,
                linenos="table" if self.linenos else False,
            )
        except ClassNotFound:
            logger.warning("Unknown Pygments style %r, using the default style.", self.style)
            return HtmlFormatter(
                cssclass=self.cssclass,
                linenos="table" if self.linenos else False,
            )

    def render(self, code: str, language: str) -> str:
        """Return the highlighted HTML block for ``code``."""
        try:
            lexer = get_lexer_by_name(language or "text")
        except ClassNotFound:
            lexer = TextLexer()
        return highlight(code, lexer, self._formatter())

    def stylesheet(self) -> str:
        """Return the CSS rules matching :meth:`render` output."""
        return self._formatter().get_style_defs(f".{self.cssclass}")


__all__ = ["PygmentsHtmlHighlighter"]
