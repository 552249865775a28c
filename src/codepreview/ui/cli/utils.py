"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from pathlib import Path


MARKDOWN_SUFFIXES = frozenset({".md", ".markdown", ".mdown", ".mkd"})


def write_output_file(target: Path, content: str) -> None:
    """Persist HTML content to disk, creating parent directories as needed."""
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as exc:  # pragma: no cover - filesystem errors
        raise OSError(f"Failed to write HTML output to '{target}': {exc}") from exc


def looks_like_markdown_path(candidate: Path) -> bool:
    """Return True when the path has a Markdown extension."""
    return candidate.suffix.lower() in MARKDOWN_SUFFIXES


def page_title(front_matter: dict[str, object], source: Path) -> str:
    """Pick a page title from front matter, falling back to the file stem."""
    title = front_matter.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    return source.stem.replace("-", " ").replace("_", " ").strip() or source.stem


__all__ = ["MARKDOWN_SUFFIXES", "looks_like_markdown_path", "page_title", "write_output_file"]
