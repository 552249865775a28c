from __future__ import annotations

import logging
from pathlib import Path

from bs4 import BeautifulSoup
from markdown import Markdown
import pytest

from codepreview.core.config import PreviewConfig
from codepreview.core.document import extract_body
from codepreview.extensions.preview import PREVIEWS_ATTRIBUTE, PreviewExtension


PAGE = """\
Intro paragraph.

{{< preview >}}
{{< snippet language="html" >}}
<p>hi</p>
{{< /snippet >}}
{{< snippet css >}}
.x{color:red}
{{< /snippet >}}
{{< /preview >}}

Closing paragraph.
"""


def _render(markdown_text: str, **config: object) -> BeautifulSoup:
    md = Markdown(extensions=["fenced_code", PreviewExtension(**config)])
    return BeautifulSoup(md.convert(markdown_text), "html.parser")


def test_preview_block_renders_surface_and_listing() -> None:
    soup = _render(PAGE)

    container = soup.find("div", class_="code-preview")
    assert container is not None
    iframe = container.find("iframe")
    assert iframe is not None
    assert extract_body(iframe["srcdoc"]) == "<style>.x{color:red}</style><p>hi</p>"

    blocks = container.find_all("details")
    assert [block["data-language"] for block in blocks] == ["html", "css"]
    paragraphs = [p.get_text() for p in soup.find_all("p", recursive=False)]
    assert paragraphs == ["Intro paragraph.", "Closing paragraph."]


def test_block_attributes_override_title_and_height() -> None:
    text = PAGE.replace("{{< preview >}}", '{{< preview title="Buttons" height="20rem" >}}')
    iframe = _render(text).find("iframe")
    assert iframe is not None
    assert iframe["title"] == "Buttons"
    assert iframe["style"] == "height:20rem"


def test_shortcodes_inside_fenced_code_are_left_alone() -> None:
    text = "```\n" + PAGE + "```\n"
    soup = _render(text)

    assert soup.find("iframe") is None
    code = soup.find("code")
    assert code is not None
    assert "{{< preview >}}" in code.get_text()


def test_each_conversion_collects_its_own_fragments() -> None:
    md = Markdown(extensions=[PreviewExtension()])
    first = md.convert(PAGE)
    assert len(getattr(md, PREVIEWS_ATTRIBUTE)) == 1

    md.reset()
    assert getattr(md, PREVIEWS_ATTRIBUTE) == []

    second_page = "{{< preview >}}\n{{< snippet javascript >}}\nrun()\n{{< /snippet >}}\n{{< /preview >}}\n"
    second = md.convert(second_page)

    first_frame = BeautifulSoup(first, "html.parser").find("iframe")
    second_frame = BeautifulSoup(second, "html.parser").find("iframe")
    assert extract_body(second_frame["srcdoc"]) == "<script>run()</script>"
    assert "run()" not in first_frame["srcdoc"]
    assert ".x{color:red}" not in second_frame["srcdoc"]

    previews = getattr(md, PREVIEWS_ATTRIBUTE)
    assert len(previews) == 1
    assert [fragment.label for fragment in previews[0].fragments] == ["javascript"]


def test_multiple_previews_on_one_page_are_independent() -> None:
    soup = _render(PAGE + "\n" + PAGE)
    frames = soup.find_all("iframe")
    assert len(frames) == 2
    for frame in frames:
        assert extract_body(frame["srcdoc"]) == "<style>.x{color:red}</style><p>hi</p>"
    for container in soup.find_all("div", class_="code-preview__listing"):
        assert len(container.find_all("details")) == 2


def test_unknown_language_degrades_to_passthrough(emitter) -> None:
    text = "{{< preview >}}\n{{< snippet foo >}}\nplain text\n{{< /snippet >}}\n{{< /preview >}}\n"
    soup = _render(text, emitter=emitter)

    iframe = soup.find("iframe")
    assert iframe is not None
    assert extract_body(iframe["srcdoc"]) == "plain text"
    details = soup.find("details")
    assert details is not None and details["data-language"] == "foo"
    assert "unknown_language" in emitter.names()


def test_unclosed_preview_is_left_as_text(emitter) -> None:
    text = "{{< preview >}}\n{{< snippet css >}}\n.x{}\n{{< /snippet >}}\n\nMore prose.\n"
    soup = _render(text, emitter=emitter)

    assert soup.find("iframe") is None
    assert "More prose." in soup.get_text()
    assert "{{< preview >}}" in soup.get_text()
    name, payload = emitter.events[0]
    assert name == "malformed_preview"
    assert "Unclosed" in payload["reason"]


def test_malformed_preview_logs_warning_by_default(caplog: pytest.LogCaptureFixture) -> None:
    text = "{{< preview >}}\nstray line\n{{< /preview >}}\n"
    with caplog.at_level(logging.WARNING, logger="codepreview"):
        soup = _render(text)

    assert soup.find("iframe") is None
    assert any("Leaving preview block untouched" in record.message for record in caplog.records)


def test_extension_accepts_config_mapping() -> None:
    soup = _render(PAGE, config={"container_class": "demo", "listing_open": True})
    container = soup.find("div", class_="demo")
    assert container is not None
    assert all(block.has_attr("open") for block in container.find_all("details"))


def test_extension_accepts_config_model() -> None:
    soup = _render(PAGE, config=PreviewConfig(title="From model"))
    iframe = soup.find("iframe")
    assert iframe is not None and iframe["title"] == "From model"


def test_extension_reads_yaml_config(tmp_path: Path) -> None:
    path = tmp_path / "preview.yml"
    path.write_text("preview:\n  snippet_class: demo-snippet\n", encoding="utf-8")

    soup = _render(PAGE, config_path=str(path))
    assert len(soup.find_all("details", class_="demo-snippet")) == 2


def test_extension_loads_by_entry_name() -> None:
    md = Markdown(extensions=["codepreview.extensions.preview:PreviewExtension"])
    soup = BeautifulSoup(md.convert(PAGE), "html.parser")
    assert soup.find("iframe") is not None


SCRIPT_PAGE = """\
{{< preview >}}
{{< snippet javascript >}}
if (x) {
\trun()
}
{{< /snippet >}}
{{< /preview >}}
"""


def test_inline_triple_backticks_do_not_hide_later_previews() -> None:
    soup = _render("```code``` is inline code.\n\n" + PAGE)

    iframe = soup.find("iframe")
    assert iframe is not None
    assert extract_body(iframe["srcdoc"]) == "<style>.x{color:red}</style><p>hi</p>"
    assert soup.find("p", string="hi") is None
    assert "{{< preview >}}" not in soup.get_text()


def test_fence_closer_with_trailing_text_does_not_close_the_block() -> None:
    soup = _render("```\n" + PAGE + "``` trailing words\n")

    assert soup.find("iframe") is not None
    assert soup.find("p", string="hi") is None


def test_fences_are_ignored_without_fenced_code() -> None:
    md = Markdown(extensions=[PreviewExtension()])
    soup = BeautifulSoup(md.convert("```\n" + PAGE + "```\n"), "html.parser")

    assert soup.find("iframe") is not None
    assert soup.find("p", string="hi") is None


def test_snippet_bodies_keep_their_tabs() -> None:
    md = Markdown(extensions=["fenced_code", PreviewExtension()])
    soup = BeautifulSoup(md.convert(SCRIPT_PAGE), "html.parser")

    (preview,) = getattr(md, PREVIEWS_ATTRIBUTE)
    assert preview.fragments[0].source == "if (x) {\n\trun()\n}"
    iframe = soup.find("iframe")
    assert iframe is not None
    assert extract_body(iframe["srcdoc"]) == "<script>if (x) {\n\trun()\n}</script>"
    details = soup.find("details")
    assert details is not None
    assert "\trun()" in details.get_text()


def test_snippet_bodies_keep_carriage_returns() -> None:
    text = PAGE.replace("<p>hi</p>\n", "<p>a</p>\n<p>b</p>\n").replace("\n", "\r\n")
    md = Markdown(extensions=[PreviewExtension()])
    soup = BeautifulSoup(md.convert(text), "html.parser")

    (preview,) = getattr(md, PREVIEWS_ATTRIBUTE)
    assert preview.fragments[0].source == "<p>a</p>\r\n<p>b</p>"
    iframe = soup.find("iframe")
    assert iframe is not None
    assert extract_body(iframe["srcdoc"]) == "<style>.x{color:red}</style><p>a</p>\r\n<p>b</p>"


def test_invalid_block_height_is_reported_and_not_rendered(emitter) -> None:
    text = PAGE.replace("{{< preview >}}", '{{< preview height="url(//tracker.example/a.png)" >}}')
    soup = _render(text, emitter=emitter)

    assert soup.find("iframe") is None
    assert not any("url(" in tag.get("style", "") for tag in soup.find_all(style=True))
    name, payload = emitter.events[0]
    assert name == "malformed_preview"
    assert "CSS length" in payload["reason"]
