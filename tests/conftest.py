from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from codepreview.core.diagnostics import NullEmitter


class RecordingEmitter(NullEmitter):
    """Emitter keeping every structured event for assertions."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()
