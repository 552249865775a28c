"""Markdown extension turning preview shortcode blocks into sandboxed previews.

Blocks are rendered in two passes. The first runs ahead of Python-Markdown's
whitespace normalisation so snippet bodies keep their tabs and line endings,
and leaves a token line where each block was. The second swaps those tokens
for HTML stash placeholders, which the normalisation pass would otherwise
strip of their control characters.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from pathlib import Path
import secrets
from typing import Any

from markdown import Markdown
from markdown.extensions import Extension
from markdown.extensions.fenced_code import FencedBlockPreprocessor
from markdown.preprocessors import Preprocessor

from codepreview.adapters.renderer import PreviewRenderer, RenderedPreview
from codepreview.core.config import PreviewConfig, coerce_config, load_config
from codepreview.core.diagnostics import DiagnosticEmitter, LoggingEmitter
from codepreview.core.exceptions import ConfigurationError
from codepreview.core.fragments import collect_fragments

from .parser import MalformedPreviewError, is_preview_start, parse_preview_block


logger = logging.getLogger(__name__)

PREVIEWS_ATTRIBUTE = "code_previews"

# Python-Markdown registers normalize_whitespace at 30 and fenced_code at 25.
_COLLECT_PRIORITY = 31
_STASH_PRIORITY = 27


def fenced_line_indices(lines: Sequence[str], *, tab_length: int = 4) -> set[int]:
    """Return the indices of ``lines`` that fenced_code renders as code blocks."""
    text = "\n".join(line.rstrip("\r").expandtabs(tab_length) for line in lines)
    covered: set[int] = set()
    for match in FencedBlockPreprocessor.FENCED_BLOCK_RE.finditer(text):
        first = text.count("\n", 0, match.start())
        last = text.count("\n", 0, match.end())
        covered.update(range(first, last + 1))
    return covered


class _PreviewCollector(Preprocessor):
    """Render preview blocks from the raw source lines and leave tokens behind."""

    def __init__(
        self,
        md: Markdown,
        renderer: PreviewRenderer,
        emitter: DiagnosticEmitter,
        pending: dict[str, str],
    ) -> None:
        super().__init__(md)
        self.renderer = renderer
        self.emitter = emitter
        self.pending = pending

    def _fenced(self, lines: Sequence[str], start: int) -> set[int]:
        if "fenced_code_block" not in self.md.preprocessors:
            return set()
        tail = fenced_line_indices(lines[start:], tab_length=self.md.tab_length)
        return {start + offset for offset in tail}

    def run(self, lines: list[str]) -> list[str]:  # type: ignore[override]
        previews: list[RenderedPreview] = []
        setattr(self.md, PREVIEWS_ATTRIBUTE, previews)
        self.pending.clear()
        nonce = secrets.token_hex(8)

        result: list[str] = []
        index = 0
        total = len(lines)
        fenced = self._fenced(lines, 0)

        while index < total:
            line = lines[index]
            if index in fenced or not is_preview_start(line):
                result.append(line)
                index += 1
                continue

            try:
                rendered, end = self._render_block(lines, index)
            except MalformedPreviewError as exc:
                self.emitter.event("malformed_preview", {"reason": str(exc), "line": exc.line + 1})
                stop = max(exc.line, index)
                result.extend(lines[index : stop + 1])
                index = stop + 1
                continue

            previews.append(rendered)
            token = f"codepreview-{nonce}-{len(previews)}"
            self.pending[token] = rendered.html
            result.extend(["", token, ""])
            index = end + 1
            # A fence opened inside the replaced block no longer exists.
            fenced = self._fenced(lines, index)

        return result

    def _render_block(self, lines: list[str], index: int) -> tuple[RenderedPreview, int]:
        declaration = parse_preview_block(lines, index)
        try:
            block_config = self.renderer.config.merged(
                title=declaration.attributes.get("title"),
                height=declaration.attributes.get("height"),
            )
        except ConfigurationError as exc:
            raise MalformedPreviewError(str(exc), line=index) from exc

        fragments = collect_fragments(
            ((snippet.language, snippet.body) for snippet in declaration.snippets),
            emitter=self.emitter,
        )
        return self.renderer.render(fragments, config=block_config), declaration.end


class _PreviewStasher(Preprocessor):
    """Swap the collector's tokens for HTML stash placeholders."""

    def __init__(self, md: Markdown, pending: dict[str, str]) -> None:
        super().__init__(md)
        self.pending = pending

    def run(self, lines: list[str]) -> list[str]:  # type: ignore[override]
        if not self.pending:
            return lines
        result: list[str] = []
        for line in lines:
            html = self.pending.pop(line, None)
            result.append(line if html is None else self.md.htmlStash.store(html))
        return result


class PreviewExtension(Extension):
    """Register the preview shortcode preprocessors."""

    def __init__(self, *, emitter: DiagnosticEmitter | None = None, **kwargs: Any) -> None:
        self.config = {
            "config": [{}, "PreviewConfig instance or mapping of preview options."],
            "config_path": ["", "YAML file holding preview options."],
        }
        self.emitter = emitter
        super().__init__(**kwargs)

    def resolve_config(self) -> PreviewConfig:
        path = self.getConfig("config_path")
        if path:
            return load_config(Path(path))
        value: PreviewConfig | Mapping[str, Any] = self.getConfig("config")
        return coerce_config(value or None)

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        emitter = self.emitter or LoggingEmitter(logger_obj=logger)
        renderer = PreviewRenderer(self.resolve_config(), emitter=emitter)
        pending: dict[str, str] = {}
        md.preprocessors.register(
            _PreviewCollector(md, renderer, emitter, pending),
            "codepreview_collect",
            _COLLECT_PRIORITY,
        )
        md.preprocessors.register(
            _PreviewStasher(md, pending), "codepreview_stash", _STASH_PRIORITY
        )
        md.registerExtension(self)
        self.md = md

    def reset(self) -> None:
        md = getattr(self, "md", None)
        if md is not None:
            setattr(md, PREVIEWS_ATTRIBUTE, [])


def makeExtension(**kwargs: Any) -> PreviewExtension:  # pragma: no cover - API hook  # noqa: N802
    return PreviewExtension(**kwargs)


__all__ = ["PREVIEWS_ATTRIBUTE", "PreviewExtension", "fenced_line_indices", "makeExtension"]
