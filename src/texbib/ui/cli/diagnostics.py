"""Console reporting for diagnostics raised while resolving a bibliography file."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from texbib.core.diagnostics import format_event_message

from .state import emit_info, emit_warning


class CliEmitter:
    """Report resolver warnings and pipeline summaries for one file."""

    def __init__(self, source: Path | None = None) -> None:
        self.source = source

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, source=self.source, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            emit_info(message, source=self.source)


__all__ = ["CliEmitter"]
