from __future__ import annotations

from bs4 import BeautifulSoup
import pytest

from codepreview.adapters.markdown import (
    DEFAULT_MARKDOWN_EXTENSIONS,
    MarkdownConversionError,
    render_markdown,
    split_front_matter,
)
from codepreview.core.config import PreviewConfig


PAGE = """\
---
title: Styling buttons
tags: [css]
---
# Buttons

{{< preview >}}
{{< snippet html >}}
<button>Go</button>
{{< /snippet >}}
{{< /preview >}}

| a | b |
|---|---|
| 1 | 2 |
"""


def test_render_markdown_collects_front_matter_and_previews() -> None:
    document = render_markdown(PAGE)

    assert document.front_matter == {"title": "Styling buttons", "tags": ["css"]}
    assert document.previews == 1
    soup = BeautifulSoup(document.html, "html.parser")
    assert soup.find("h1").get_text() == "Buttons"
    assert soup.find("iframe") is not None
    assert soup.find("table") is not None


def test_render_markdown_applies_preview_config() -> None:
    document = render_markdown(PAGE, config=PreviewConfig(container_class="demo"))
    soup = BeautifulSoup(document.html, "html.parser")
    assert soup.find("div", class_="demo") is not None


def test_render_markdown_without_preview_extension() -> None:
    document = render_markdown(PAGE, extensions=["tables"])
    assert document.previews == 0
    assert "<iframe" not in document.html


def test_render_markdown_reports_unknown_extension() -> None:
    with pytest.raises(MarkdownConversionError):
        render_markdown("text", extensions=["codepreview_missing_extension"])


def test_default_extensions_include_preview() -> None:
    assert "codepreview.extensions.preview:PreviewExtension" in DEFAULT_MARKDOWN_EXTENSIONS


def test_split_front_matter_without_block() -> None:
    metadata, body = split_front_matter("# Title\n")
    assert metadata == {}
    assert body == "# Title\n"


def test_split_front_matter_ignores_invalid_yaml() -> None:
    source = "---\ntitle: [unclosed\n---\nBody\n"
    metadata, body = split_front_matter(source)
    assert metadata == {}
    assert body == source

