"""Reusable Typer option declarations shared by the CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


DIAGNOSTICS_PANEL = "Diagnostics"

InputPathArgument = Annotated[
    list[Path] | None,
    typer.Argument(
        help="Markdown documents containing preview shortcodes.",
        show_default=False,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Directory receiving one '<name>.html' per input. Prints to stdout when omitted.",
        file_okay=False,
        dir_okay=True,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML file holding preview options (top level or under a 'preview' key).",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
]

StandaloneOption = Annotated[
    bool,
    typer.Option(
        "--standalone/--fragment",
        help="Wrap each page in a minimal HTML document embedding the listing styles.",
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
