from __future__ import annotations

from bs4 import BeautifulSoup, Tag
import pytest

from codepreview.adapters.renderer import PreviewRenderer
from codepreview.core.config import PreviewConfig
from codepreview.core.document import extract_body
from codepreview.core.exceptions import PreviewRenderingError
from codepreview.core.fragments import Fragment, Language, collect_fragments


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _sandbox_tokens(iframe: Tag) -> set[str]:
    value = iframe["sandbox"]
    if isinstance(value, str):
        return set(value.split())
    return set(value)


def _listing_blocks(soup: BeautifulSoup) -> list[Tag]:
    listing = soup.find("div", class_="code-preview__listing")
    assert listing is not None
    return listing.find_all("details", class_="code-preview__snippet")


def _listing_source(block: Tag) -> str:
    code = block.find("div", class_="highlight")
    assert code is not None
    return code.get_text().rstrip("\n")


def test_scenario_html_and_css_fragments() -> None:
    fragments = collect_fragments([("html", "<p>hi</p>"), ("css", ".x{color:red}")])
    rendered = PreviewRenderer().render(fragments)
    soup = _soup(rendered.html)

    iframes = soup.find_all("iframe")
    assert len(iframes) == 1
    srcdoc = iframes[0]["srcdoc"]
    assert srcdoc == rendered.document
    assert extract_body(srcdoc) == "<style>.x{color:red}</style><p>hi</p>"

    blocks = _listing_blocks(soup)
    assert [_listing_source(block) for block in blocks] == ["<p>hi</p>", ".x{color:red}"]
    assert [block["data-language"] for block in blocks] == ["html", "css"]


def test_scenario_unknown_language_passthrough() -> None:
    fragments = collect_fragments([("foo", "plain text")])
    assert fragments[0].wrapped == "plain text"

    soup = _soup(PreviewRenderer().render(fragments).html)
    (block,) = _listing_blocks(soup)
    assert block["data-language"] == "foo"
    summary = block.find("summary")
    assert summary is not None and summary.get_text() == "foo"
    assert _listing_source(block) == "plain text"


def test_listing_shows_original_source_in_declaration_order() -> None:
    declarations = [
        ("html", "\n<button id='go'>Go</button>\n"),
        ("javascript", "document.getElementById('go').onclick = () => alert(1);"),
        ("css", "button{color:red}"),
        ("text", "notes"),
    ]
    fragments = collect_fragments(declarations)
    soup = _soup(PreviewRenderer().render(fragments).html)

    blocks = _listing_blocks(soup)
    assert len(blocks) == len(declarations)
    assert [_listing_source(block) for block in blocks] == [
        "<button id='go'>Go</button>",
        "document.getElementById('go').onclick = () => alert(1);",
        "button{color:red}",
        "notes",
    ]
    assert all("<script>" not in _listing_source(block) for block in blocks)
    assert [block["data-position"] for block in blocks] == ["0", "1", "2", "3"]


def test_sandbox_allows_scripts_but_not_same_origin() -> None:
    fragments = collect_fragments([("javascript", "console.log('hi')")])
    iframe = _soup(PreviewRenderer().render(fragments).surface).find("iframe")
    assert iframe is not None

    tokens = _sandbox_tokens(iframe)
    assert "allow-scripts" in tokens
    assert "allow-same-origin" not in tokens


def test_srcdoc_escapes_quotes_and_brackets() -> None:
    fragments = collect_fragments(
        [("html", '<p title="a \'quoted\' value">x &amp; y</p>'), ("javascript", 'say("hi")')]
    )
    rendered = PreviewRenderer().render(fragments)

    raw_attribute = rendered.surface.split('srcdoc="', 1)[1].split('"', 1)[0]
    assert "<" not in raw_attribute
    assert "'" not in raw_attribute

    iframe = _soup(rendered.surface).find("iframe")
    assert iframe is not None
    assert iframe["srcdoc"] == rendered.document


def test_surface_has_no_external_resources() -> None:
    fragments = collect_fragments([("html", "<p>offline</p>"), ("css", "p{color:blue}")])
    soup = _soup(PreviewRenderer().render(fragments).html)

    assert soup.find("script") is None
    assert soup.find("link") is None
    assert all(not tag.get("src") for tag in soup.find_all(True))


def test_class_hooks_follow_configuration() -> None:
    config = PreviewConfig(
        container_class="demo",
        surface_class="demo-frame",
        listing_class="demo-code",
        snippet_class="demo-snippet",
        listing_open=True,
        height="12rem",
        title="Live demo",
    )
    fragments = collect_fragments([("html", "<p>hi</p>")])
    soup = _soup(PreviewRenderer(config).render(fragments).html)

    container = soup.find("div", class_="demo")
    assert container is not None
    assert container.find("div", class_="demo-frame") is not None
    details = container.find("div", class_="demo-code").find("details")
    assert details is not None
    assert "demo-snippet" in details["class"]
    assert details.has_attr("open")

    iframe = container.find("iframe")
    assert iframe["title"] == "Live demo"
    assert iframe["style"] == "height:12rem"


def test_per_call_config_override() -> None:
    renderer = PreviewRenderer()
    fragments = collect_fragments([("html", "<p>hi</p>")])
    rendered = renderer.render(fragments, config=renderer.config.merged(title="Override"))

    iframe = _soup(rendered.surface).find("iframe")
    assert iframe is not None and iframe["title"] == "Override"
    assert renderer.config.title == "Code preview"


def test_render_rejects_duplicate_positions() -> None:
    fragments = [
        Fragment(position=0, language=Language.HTML, label="html", source="<p>a</p>"),
        Fragment(position=0, language=Language.CSS, label="css", source="p{}"),
    ]
    with pytest.raises(PreviewRenderingError):
        PreviewRenderer().render(fragments)


def test_render_sorts_fragments_by_position() -> None:
    fragments = [
        Fragment(position=1, language=Language.HTML, label="html", source="<p>second</p>"),
        Fragment(position=0, language=Language.HTML, label="html", source="<p>first</p>"),
    ]
    rendered = PreviewRenderer().render(fragments)

    assert extract_body(rendered.document) == "<p>first</p><p>second</p>"
    assert [fragment.position for fragment in rendered.fragments] == [0, 1]


def test_render_emits_summary_event(emitter) -> None:
    fragments = collect_fragments([("html", "<p>hi</p>"), ("css", "p{}")])
    PreviewRenderer(emitter=emitter).render(fragments)

    assert emitter.events == [
        ("preview_rendered", {"fragments": 2, "languages": ["html", "css"]})
    ]


def test_stylesheet_targets_highlight_class() -> None:
    css = PreviewRenderer(PreviewConfig(highlight_style="monokai")).stylesheet()
    assert ".highlight" in css


def test_render_page_wraps_body_with_styles() -> None:
    renderer = PreviewRenderer()
    page = renderer.render_page("<p>body</p>", title="A <title>")
    soup = _soup(page)

    assert soup.find("title").get_text() == "A <title>"
    assert ".highlight" in soup.find("style").get_text()
    assert soup.find("body").find("p").get_text() == "body"
