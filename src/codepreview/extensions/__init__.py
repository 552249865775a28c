"""Central registry for the bundled Markdown extensions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from importlib import import_module
from typing import Any


__all__ = [
    "ExtensionSpec",
    "available_extensions",
    "get_extension_spec",
    "load_markdown_extension",
]


def _load_attribute(path: str) -> Any:
    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        msg = f"Extension entry point '{path}' must use the 'module:attribute' format."
        raise ValueError(msg)
    module = import_module(module_name)
    target: Any = module
    for chunk in attribute.split("."):
        target = getattr(target, chunk)
    return target


def _normalise_slug(value: str) -> str:
    slug = value.split(":", 1)[0].lower()
    if slug.startswith("codepreview.extensions."):
        return slug.removeprefix("codepreview.extensions.")
    return slug.removeprefix("codepreview.")


@dataclass(frozen=True, slots=True)
class ExtensionSpec:
    """Describe how to import the Markdown hook of an extension."""

    slug: str
    markdown_entry: str
    description: str | None = None

    @property
    def package_name(self) -> str:
        return f"codepreview.extensions.{self.slug}"


_EXTENSIONS: dict[str, ExtensionSpec] = {
    "preview": ExtensionSpec(
        slug="preview",
        markdown_entry="codepreview.extensions.preview:PreviewExtension",
        description="Sandboxed live preview of html/css/javascript snippets with listings.",
    ),
}


def available_extensions() -> list[ExtensionSpec]:
    """Return the registered extension specs sorted by slug."""
    return [_EXTENSIONS[key] for key in sorted(_EXTENSIONS)]


def get_extension_spec(name: str) -> ExtensionSpec:
    """Look up the runtime spec for a given extension slug or qualified name."""
    slug = _normalise_slug(name)
    try:
        return _EXTENSIONS[slug]
    except KeyError as exc:
        raise KeyError(f"No codepreview extension named '{name}'.") from exc


def load_markdown_extension(name: str, **config: Any) -> Any:
    """Instantiate a Python-Markdown extension by slug or qualified name."""
    spec = get_extension_spec(name)
    factory: Callable[..., Any] = _load_attribute(spec.markdown_entry)
    return factory(**config)
