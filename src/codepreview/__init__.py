"""Sandboxed live previews of html, css and javascript snippets for Markdown pages."""

from __future__ import annotations

from codepreview.adapters.highlight import PygmentsHtmlHighlighter
from codepreview.adapters.markdown import MarkdownDocument, render_markdown
from codepreview.adapters.renderer import PreviewRenderer, RenderedPreview
from codepreview.core.config import PreviewConfig, load_config
from codepreview.core.diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from codepreview.core.document import compose_body, compose_document
from codepreview.core.escaping import (
    escape_attribute,
    escape_html,
    escape_script,
    escape_style,
    unescape_attribute,
    unescape_html,
    unescape_script,
    unescape_style,
)
from codepreview.core.exceptions import (
    CollectorStateError,
    ConfigurationError,
    PreviewError,
    PreviewRenderingError,
    WrappingError,
)
from codepreview.core.fragments import (
    Fragment,
    FragmentCollector,
    Language,
    collect_fragments,
    unwrap_source,
    wrap_source,
)
from codepreview.extensions.preview import PreviewExtension
from codepreview.version import get_version


__version__ = get_version()

__all__ = [
    "CollectorStateError",
    "ConfigurationError",
    "DiagnosticEmitter",
    "Fragment",
    "FragmentCollector",
    "Language",
    "LoggingEmitter",
    "MarkdownDocument",
    "NullEmitter",
    "PreviewConfig",
    "PreviewError",
    "PreviewExtension",
    "PreviewRenderer",
    "PreviewRenderingError",
    "PygmentsHtmlHighlighter",
    "RenderedPreview",
    "WrappingError",
    "__version__",
    "collect_fragments",
    "compose_body",
    "compose_document",
    "get_version",
    "escape_attribute",
    "escape_html",
    "escape_script",
    "escape_style",
    "load_config",
    "render_markdown",
    "unescape_attribute",
    "unescape_html",
    "unescape_script",
    "unescape_style",
    "unwrap_source",
    "wrap_source",
]
