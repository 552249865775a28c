"""Configuration model for the code preview renderer.

PreviewConfig

`container_class` (`str`)
: Class set on the element wrapping the whole preview.

`surface_class` (`str`)
: Class set on the element wrapping the sandboxed ``<iframe>``.

`listing_class` (`str`)
: Class set on the container holding the source listings.

`snippet_class` (`str`)
: Class set on every collapsible ``<details>`` listing block.

`sandbox` (`list[str]`)
: Tokens written to the ``sandbox`` attribute of the ``<iframe>``. Must
  contain ``allow-scripts`` and can never contain ``allow-same-origin``.

`title` (`str`)
: Accessible title of the ``<iframe>``.

`height` (`str | None`)
: Optional CSS height applied inline to the ``<iframe>``. Only plain lengths
  such as ``20rem``, ``320px`` or ``50%`` are accepted.

`highlight_style` (`str`)
: Pygments style used for the listings and for :meth:`stylesheet` output.

`linenos` (`bool`)
: Render line numbers in the listings.

`listing_open` (`bool`)
: Render the listing blocks expanded.

`reset_css` (`str`)
: Stylesheet placed in the ``<head>`` of the composed document.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigurationError


DEFAULT_RESET_CSS = (
    "*,*::before,*::after{box-sizing:border-box}"
    "html,body{margin:0;padding:0}"
    "body{font-family:system-ui,sans-serif;padding:.5rem}"
)

SANDBOX_TOKENS = frozenset(
    {
        "allow-downloads",
        "allow-forms",
        "allow-modals",
        "allow-orientation-lock",
        "allow-pointer-lock",
        "allow-popups",
        "allow-popups-to-escape-sandbox",
        "allow-presentation",
        "allow-scripts",
    }
)
FORBIDDEN_SANDBOX_TOKENS = frozenset(
    {
        "allow-same-origin",
        "allow-top-navigation",
        "allow-top-navigation-by-user-activation",
        "allow-top-navigation-to-custom-protocols",
    }
)


HEIGHT_PATTERN = re.compile(
    r"^(?:\d+(?:\.\d+)?|\.\d+)(?:px|em|rem|ex|ch|vh|vw|vmin|vmax|cm|mm|in|pt|pc|%)$"
)


class PreviewConfig(BaseModel):
    """Rendering options shared by every preview on a page."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    container_class: str = "code-preview"
    surface_class: str = "code-preview__surface"
    listing_class: str = "code-preview__listing"
    snippet_class: str = "code-preview__snippet"
    sandbox: list[str] = Field(default_factory=lambda: ["allow-scripts"])
    title: str = "Code preview"
    height: str | None = None
    highlight_style: str = "default"
    linenos: bool = False
    listing_open: bool = False
    reset_css: str = DEFAULT_RESET_CSS

    @field_validator("sandbox")
    @classmethod
    def check_sandbox(cls, value: list[str]) -> list[str]:
        """Keep the iframe isolated from the embedding page."""
        tokens: list[str] = []
        for raw in value:
            token = raw.strip().lower()
            if not token or token in tokens:
                continue
            if token in FORBIDDEN_SANDBOX_TOKENS:
                raise ValueError(f"Sandbox token '{token}' would break preview isolation.")
            if token not in SANDBOX_TOKENS:
                raise ValueError(f"Unknown sandbox token '{token}'.")
            tokens.append(token)
        if "allow-scripts" not in tokens:
            raise ValueError("Sandbox tokens must include 'allow-scripts'.")
        return tokens

    @field_validator("height")
    @classmethod
    def check_height(cls, value: str | None) -> str | None:
        """Accept plain CSS lengths for the inline ``height`` style."""
        if value is None:
            return None
        height = value.strip().lower()
        if height == "0":
            return height
        if not HEIGHT_PATTERN.match(height):
            raise ValueError(f"Height '{value}' is not a CSS length such as '20rem'.")
        return height

    @property
    def sandbox_attribute(self) -> str:
        return " ".join(self.sandbox)

    def merged(self, **overrides: Any) -> PreviewConfig:
        """Return a copy with per-block overrides applied and re-validated."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if not values:
            return self
        try:
            return self.model_validate({**self.model_dump(), **values})
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid preview override: {exc}") from exc


def coerce_config(value: PreviewConfig | Mapping[str, Any] | None) -> PreviewConfig:
    """Accept a model, a plain mapping, or ``None`` and return a model."""
    if value is None:
        return PreviewConfig()
    if isinstance(value, PreviewConfig):
        return value
    try:
        return PreviewConfig.model_validate(dict(value))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid preview configuration: {exc}") from exc


def load_config(path: Path | str) -> PreviewConfig:
    """Load a :class:`PreviewConfig` from a YAML file.

    The options may live at the top level or under a ``preview`` key.
    """
    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration '{config_path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in '{config_path}': {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration '{config_path}' must contain a mapping.")
    section = data.get("preview", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"The 'preview' section of '{config_path}' must be a mapping.")
    return coerce_config(section)


__all__ = [
    "DEFAULT_RESET_CSS",
    "FORBIDDEN_SANDBOX_TOKENS",
    "HEIGHT_PATTERN",
    "SANDBOX_TOKENS",
    "PreviewConfig",
    "coerce_config",
    "load_config",
]
