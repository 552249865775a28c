"""Markdown conversion utilities for pages embedding code previews."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import markdown
import yaml

from codepreview.core.config import PreviewConfig
from codepreview.core.diagnostics import DiagnosticEmitter
from codepreview.core.exceptions import PreviewError


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "PREVIEW_EXTENSION",
    "MarkdownConversionError",
    "MarkdownDocument",
    "render_markdown",
    "split_front_matter",
]


PREVIEW_EXTENSION = "codepreview.extensions.preview:PreviewExtension"

DEFAULT_MARKDOWN_EXTENSIONS = [
    PREVIEW_EXTENSION,
    "abbr",
    "attr_list",
    "def_list",
    "fenced_code",
    "footnotes",
    "tables",
]


class MarkdownConversionError(Exception):
    """Raised when Markdown cannot be converted into HTML."""


@dataclass(slots=True)
class MarkdownDocument:
    """Result of converting Markdown into HTML."""

    html: str
    front_matter: dict[str, Any]
    previews: int = 0


def _is_preview_extension(value: str) -> bool:
    name = value.split(":", 1)[0].lower()
    return name in {"codepreview.extensions.preview", "codepreview.preview", "preview"}


def render_markdown(
    source: str,
    extensions: Sequence[str] | None = None,
    *,
    config: PreviewConfig | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> MarkdownDocument:
    """Convert Markdown source into HTML while collecting front matter.

    A new Markdown processor is built for every call so nothing collected
    for one page can reach another.
    """
    from codepreview.extensions.preview import PREVIEWS_ATTRIBUTE, PreviewExtension

    metadata, markdown_body = split_front_matter(source)

    requested = list(DEFAULT_MARKDOWN_EXTENSIONS if extensions is None else extensions)
    active_extensions: list[Any] = []
    for extension in requested:
        if _is_preview_extension(extension):
            active_extensions.append(PreviewExtension(config=config or {}, emitter=emitter))
        else:
            active_extensions.append(extension)

    try:
        processor = markdown.Markdown(extensions=active_extensions)
    except PreviewError:
        raise
    except Exception as exc:
        raise MarkdownConversionError(f"Failed to initialize Markdown processor: {exc}") from exc

    try:
        html = processor.convert(markdown_body)
    except PreviewError:
        raise
    except Exception as exc:
        raise MarkdownConversionError(f"Failed to convert Markdown source: {exc}") from exc

    previews = getattr(processor, PREVIEWS_ATTRIBUTE, [])
    return MarkdownDocument(html=html, front_matter=metadata, previews=len(previews))


def split_front_matter(source: str) -> tuple[dict[str, Any], str]:
    """Split YAML front matter from Markdown content, returning metadata and body."""
    candidate = source.lstrip("\ufeff")
    prefix_len = len(source) - len(candidate)
    lines = candidate.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, source

    front_matter_lines: list[str] = []
    closing_index: int | None = None
    for idx, line in enumerate(lines[1:], start=1):
        stripped = line.strip()
        if stripped in {"---", "..."}:
            closing_index = idx
            break
        front_matter_lines.append(line)

    if closing_index is None:
        return {}, source

    raw_block = "\n".join(front_matter_lines)
    try:
        metadata = yaml.safe_load(raw_block) or {}
    except yaml.YAMLError:
        return {}, source

    if not isinstance(metadata, dict):
        metadata = {}

    body_lines = lines[closing_index + 1 :]
    body = "\n".join(body_lines)
    if source.endswith("\n"):
        body += "\n"

    prefix = source[:prefix_len]
    return metadata, prefix + body
