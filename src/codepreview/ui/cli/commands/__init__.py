"""CLI command implementations exposed via `codepreview.ui.cli`."""

from __future__ import annotations

from .render import render
from .styles import styles


__all__ = ["render", "styles"]
