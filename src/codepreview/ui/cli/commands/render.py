"""Implementation of the `codepreview render` command."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from codepreview.adapters.markdown import MarkdownConversionError, render_markdown
from codepreview.adapters.renderer import PreviewRenderer
from codepreview.core.config import PreviewConfig, load_config
from codepreview.core.exceptions import PreviewError

from .._options import (
    ConfigOption,
    DebugOption,
    InputPathArgument,
    OutputPathOption,
    StandaloneOption,
    VerboseOption,
)
from ..diagnostics import CliEmitter
from ..state import (
    configure_logging,
    emit_error,
    emit_warning,
    get_cli_state,
    set_cli_state,
)
from ..utils import looks_like_markdown_path, page_title, write_output_file


logger = logging.getLogger(__name__)


def render(
    inputs: InputPathArgument = None,
    output: OutputPathOption = None,
    config: ConfigOption = None,
    standalone: StandaloneOption = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Render Markdown pages, expanding preview shortcodes into sandboxed previews."""
    state = set_cli_state(verbosity=verbose, debug=debug)

    documents = list(inputs or [])
    if not documents:
        raise typer.BadParameter("Provide at least one Markdown (.md) document.")
    for document in documents:
        if not looks_like_markdown_path(document):
            raise typer.BadParameter(f"'{document}' is not a Markdown document.")

    try:
        preview_config = load_config(config) if config is not None else PreviewConfig()
    except PreviewError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    with configure_logging(state.verbosity):
        _render_documents(documents, output, preview_config, standalone=standalone)


def _render_documents(
    documents: list[Path],
    output: Path | None,
    preview_config: PreviewConfig,
    *,
    standalone: bool,
) -> None:
    state = get_cli_state()
    emitter = CliEmitter(state)
    page_renderer = PreviewRenderer(preview_config) if standalone else None

    for document in documents:
        try:
            source = document.read_text(encoding="utf-8")
        except OSError as exc:
            emit_error(f"Unable to read '{document}'.", exception=exc)
            raise typer.Exit(code=1) from exc

        try:
            result = render_markdown(source, config=preview_config, emitter=emitter)
        except (MarkdownConversionError, PreviewError) as exc:
            emit_error(f"Failed to render '{document}': {exc}", exception=exc)
            raise typer.Exit(code=1) from exc

        html = result.html
        if page_renderer is not None:
            html = page_renderer.render_page(
                html, title=page_title(result.front_matter, document)
            )

        if output is None:
            typer.echo(html)
            continue

        target = output / f"{document.stem}.html"
        write_output_file(target, html if html.endswith("\n") else f"{html}\n")
        logger.info("Wrote %s (%d previews)", target, result.previews)

    skipped = state.consume_events("malformed_preview")
    if skipped:
        emit_warning(
            f"{len(skipped)} preview block(s) could not be rendered and were left as written."
        )
