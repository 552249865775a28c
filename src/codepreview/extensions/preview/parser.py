"""Parser for the ``{{< preview >}}`` / ``{{< snippet >}}`` shortcode blocks."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import re
import shlex

from codepreview.core.exceptions import PreviewError


PREVIEW_TAG = "preview"
SNIPPET_TAG = "snippet"

SHORTCODE_LINE = re.compile(
    r"""
    ^\s*
    \{\{(?P<open>[<%])
    \s*(?P<closing>/)?\s*
    (?P<name>[A-Za-z][\w-]*)
    (?P<args>.*?)
    \s*(?P<close>[>%])\}\}
    \s*$
    """,
    re.VERBOSE,
)
_DELIMITERS = {"<": ">", "%": "%"}


class MalformedPreviewError(PreviewError):
    """Raised when a preview block cannot be parsed."""

    def __init__(self, message: str, *, line: int) -> None:
        super().__init__(message)
        self.line = line


@dataclass(frozen=True, slots=True)
class ShortcodeTag:
    """A shortcode occupying a whole line."""

    name: str
    closing: bool = False
    positional: tuple[str, ...] = ()
    attributes: dict[str, str] = field(default_factory=dict)

    def get(self, *keys: str) -> str | None:
        """Return the first attribute found among ``keys``."""
        for key in keys:
            if key in self.attributes:
                return self.attributes[key]
        return None


@dataclass(frozen=True, slots=True)
class SnippetDeclaration:
    """Language tag and raw body of one ``snippet`` block."""

    language: str | None
    body: str
    line: int


@dataclass(frozen=True, slots=True)
class PreviewDeclaration:
    """A parsed ``preview`` block spanning ``lines[start:end + 1]``."""

    start: int
    end: int
    attributes: dict[str, str]
    snippets: tuple[SnippetDeclaration, ...]


def parse_shortcode(line: str) -> ShortcodeTag | None:
    """Parse a line holding a single shortcode, or return ``None``."""
    match = SHORTCODE_LINE.match(line)
    if match is None:
        return None
    if _DELIMITERS[match.group("open")] != match.group("close"):
        return None

    positional: list[str] = []
    attributes: dict[str, str] = {}
    lexer = shlex.shlex(match.group("args"), posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    try:
        tokens = list(lexer)
    except ValueError:
        return None

    for token in tokens:
        if "=" in token:
            key, value = token.split("=", 1)
            attributes[key.strip().lower()] = value
        else:
            positional.append(token)

    return ShortcodeTag(
        name=match.group("name").lower(),
        closing=match.group("closing") is not None,
        positional=tuple(positional),
        attributes=attributes,
    )


def is_preview_start(line: str) -> bool:
    tag = parse_shortcode(line)
    return tag is not None and tag.name == PREVIEW_TAG and not tag.closing


def _snippet_language(tag: ShortcodeTag) -> str | None:
    language = tag.get("language", "lang")
    if language is None and tag.positional:
        language = tag.positional[0]
    return language


def parse_preview_block(lines: Sequence[str], start: int) -> PreviewDeclaration:
    """Parse the preview block opening at ``lines[start]``.

    Raises :class:`MalformedPreviewError` carrying the offending line index
    when the block is unclosed, nested, or has content outside a snippet.
    """
    opening = parse_shortcode(lines[start])
    if opening is None or opening.name != PREVIEW_TAG or opening.closing:
        raise MalformedPreviewError("Expected an opening preview shortcode.", line=start)

    snippets: list[SnippetDeclaration] = []
    index = start + 1
    total = len(lines)

    while index < total:
        line = lines[index]
        tag = parse_shortcode(line)

        if tag is None:
            if line.strip():
                raise MalformedPreviewError(
                    "Content outside of a snippet block.", line=index
                )
            index += 1
            continue

        if tag.name == PREVIEW_TAG:
            if tag.closing:
                return PreviewDeclaration(
                    start=start,
                    end=index,
                    attributes=dict(opening.attributes),
                    snippets=tuple(snippets),
                )
            raise MalformedPreviewError("Preview blocks cannot be nested.", line=index)

        if tag.name != SNIPPET_TAG or tag.closing:
            raise MalformedPreviewError(
                f"Unexpected shortcode '{tag.name}' inside a preview block.", line=index
            )

        body_start = index + 1
        index = body_start
        while index < total:
            closing = parse_shortcode(lines[index])
            if closing is not None and closing.name == SNIPPET_TAG and closing.closing:
                break
            index += 1
        else:
            raise MalformedPreviewError("Unclosed snippet block.", line=total - 1)

        snippets.append(
            SnippetDeclaration(
                language=_snippet_language(tag),
                body="\n".join(lines[body_start:index]),
                line=body_start - 1,
            )
        )
        index += 1

    raise MalformedPreviewError("Unclosed preview block.", line=total - 1)


__all__ = [
    "PREVIEW_TAG",
    "SNIPPET_TAG",
    "MalformedPreviewError",
    "PreviewDeclaration",
    "ShortcodeTag",
    "SnippetDeclaration",
    "is_preview_start",
    "parse_preview_block",
    "parse_shortcode",
]
