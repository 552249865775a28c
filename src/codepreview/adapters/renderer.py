"""Render collected fragments into a sandboxed preview and a source listing."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError as JinjaTemplateError

from codepreview.adapters.highlight import PygmentsHtmlHighlighter
from codepreview.core.config import PreviewConfig, coerce_config
from codepreview.core.diagnostics import DiagnosticEmitter, NullEmitter
from codepreview.core.document import compose_document
from codepreview.core.escaping import escape_attribute, escape_html, escape_style
from codepreview.core.exceptions import PreviewRenderingError
from codepreview.core.fragments import Fragment


logger = logging.getLogger(__name__)

TEMPLATE_ROOT = Path(__file__).resolve().parent / "templates"


def _build_environment(template_root: Path = TEMPLATE_ROOT) -> Environment:
    loader = FileSystemLoader(str(template_root))
    environment = Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )
    environment.filters["attribute_escape"] = escape_attribute
    environment.filters["html_escape"] = escape_html
    environment.filters["style_escape"] = escape_style
    return environment


@dataclass(frozen=True, slots=True)
class ListingEntry:
    """Template view of a fragment in the listing."""

    position: int
    label: str
    highlighted: str


@dataclass(frozen=True, slots=True)
class RenderedPreview:
    """HTML produced for one preview block."""

    surface: str
    listing: str
    document: str
    html: str
    fragments: tuple[Fragment, ...]


class PreviewRenderer:
    """Turn a closed set of fragments into the preview markup."""

    def __init__(
        self,
        config: PreviewConfig | Mapping[str, Any] | None = None,
        *,
        highlighter: PygmentsHtmlHighlighter | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.config = coerce_config(config)
        self.highlighter = highlighter or PygmentsHtmlHighlighter(
            style=self.config.highlight_style,
            linenos=self.config.linenos,
        )
        self.emitter = emitter or NullEmitter()
        self.environment = _build_environment()

    def render(
        self,
        fragments: Sequence[Fragment],
        *,
        config: PreviewConfig | None = None,
    ) -> RenderedPreview:
        """Render the surface and listing for ``fragments``.

        ``config`` replaces the renderer configuration for this call only,
        which is how per-block overrides such as ``title`` are applied.
        """
        active = config or self.config
        ordered = tuple(sorted(fragments, key=lambda fragment: fragment.position))
        positions = [fragment.position for fragment in ordered]
        if len(set(positions)) != len(positions):
            raise PreviewRenderingError("Fragment positions must be unique within a preview.")

        document = compose_document(ordered, reset_css=active.reset_css)
        entries = [
            ListingEntry(
                position=fragment.position,
                label=fragment.label,
                highlighted=self.highlighter.render(fragment.source, fragment.label),
            )
            for fragment in ordered
        ]

        surface = self._render_template("surface.html.j2", config=active, document=document)
        listing = self._render_template("listing.html.j2", config=active, snippets=entries)
        html = self._render_template(
            "preview.html.j2", config=active, surface=surface, listing=listing
        )

        self.emitter.event(
            "preview_rendered",
            {
                "fragments": len(ordered),
                "languages": [fragment.label for fragment in ordered],
            },
        )
        logger.debug("Rendered preview document of %d characters", len(document))
        return RenderedPreview(
            surface=surface,
            listing=listing,
            document=document,
            html=html,
            fragments=ordered,
        )

    def render_page(self, body: str, *, title: str, language: str = "en") -> str:
        """Wrap rendered HTML in a minimal standalone page with the listing styles."""
        return self._render_template(
            "standalone.html.j2",
            body=body,
            title=title,
            language=language,
            stylesheet=self.stylesheet(),
        )

    def stylesheet(self) -> str:
        """Return the highlight stylesheet matching the listings."""
        return self.highlighter.stylesheet()

    def _render_template(self, template_name: str, **context: Any) -> str:
        try:
            template = self.environment.get_template(template_name)
            return template.render(context)
        except JinjaTemplateError as exc:
            raise PreviewRenderingError(
                f"Failed to render preview template '{template_name}': {exc}"
            ) from exc


__all__ = ["ListingEntry", "PreviewRenderer", "RenderedPreview", "TEMPLATE_ROOT"]
