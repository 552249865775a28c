"""Public entry points for the code preview Markdown extension."""

from __future__ import annotations

from .markdown import PREVIEWS_ATTRIBUTE, PreviewExtension, makeExtension
from .parser import (
    MalformedPreviewError,
    PreviewDeclaration,
    ShortcodeTag,
    SnippetDeclaration,
    parse_preview_block,
    parse_shortcode,
)


__all__ = [
    "PREVIEWS_ATTRIBUTE",
    "MalformedPreviewError",
    "PreviewDeclaration",
    "PreviewExtension",
    "ShortcodeTag",
    "SnippetDeclaration",
    "makeExtension",
    "parse_preview_block",
    "parse_shortcode",
]
