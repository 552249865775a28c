"""Domain layer: fragments, escaping, document composition and configuration."""

from __future__ import annotations

from .config import PreviewConfig, coerce_config, load_config
from .diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from .document import compose_body, compose_document
from .exceptions import (
    CollectorStateError,
    ConfigurationError,
    PreviewError,
    PreviewRenderingError,
    WrappingError,
)
from .fragments import (
    Fragment,
    FragmentCollector,
    Language,
    collect_fragments,
    unwrap_source,
    wrap_source,
)


__all__ = [
    "CollectorStateError",
    "ConfigurationError",
    "DiagnosticEmitter",
    "Fragment",
    "FragmentCollector",
    "Language",
    "LoggingEmitter",
    "NullEmitter",
    "PreviewConfig",
    "PreviewError",
    "PreviewRenderingError",
    "WrappingError",
    "coerce_config",
    "collect_fragments",
    "compose_body",
    "compose_document",
    "load_config",
    "unwrap_source",
    "wrap_source",
]
