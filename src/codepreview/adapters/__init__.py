"""Adapters binding the preview core to Pygments, Jinja2 and Python-Markdown."""

from __future__ import annotations

from .highlight import PygmentsHtmlHighlighter
from .renderer import PreviewRenderer, RenderedPreview


__all__ = ["PreviewRenderer", "PygmentsHtmlHighlighter", "RenderedPreview"]
