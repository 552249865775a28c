"""Implementation of the `codepreview styles` command."""

from __future__ import annotations

import typer

from codepreview.adapters.renderer import PreviewRenderer
from codepreview.core.config import PreviewConfig, load_config
from codepreview.core.exceptions import PreviewError

from .._options import ConfigOption
from ..state import emit_error


def styles(config: ConfigOption = None) -> None:
    """Print the syntax highlighting stylesheet used by the listings."""
    try:
        preview_config = load_config(config) if config is not None else PreviewConfig()
    except PreviewError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    typer.echo(PreviewRenderer(preview_config).stylesheet())
