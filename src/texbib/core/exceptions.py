"""Exception hierarchy for the BibTeX resolution pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .model import Span


class BibtexError(Exception):
    """Base exception for parsing and resolution failures."""

    def __init__(self, message: str, *, source: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.source = source

    def __str__(self) -> str:
        if self.source is not None:
            return f"{self.source}: {self.message}"
        return self.message


class BibtexSyntaxError(BibtexError):
    """Raised when the grammar cannot make sense of the input text."""

    def __init__(self, message: str, *, span: Span, context: str = "") -> None:
        detail = f"{message} at line {span.line}, column {span.column}"
        if context:
            detail = f"{detail}:\n{context}"
        super().__init__(detail)
        self.reason = message
        self.span = span
        self.context = context


class UndefinedVariableError(BibtexError):
    """Raised when an abbreviation names an unknown string variable."""

    def __init__(self, name: str) -> None:
        super().__init__(f"String variable '{name}' is not defined.")
        self.name = name


class CyclicVariableError(BibtexError):
    """Raised when string variables reference each other in a loop."""

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        super().__init__(f"String variable cycle detected: {' -> '.join(self.chain)}.")

    @property
    def name(self) -> str:
        return self.chain[0]


class ExpansionDepthError(BibtexError):
    """Raised when a chain of variable references exceeds the configured depth."""

    def __init__(self, name: str, depth: int) -> None:
        super().__init__(
            f"Expanding string variable '{name}' exceeded the maximum depth of {depth}."
        )
        self.name = name
        self.depth = depth


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "BibtexError",
    "BibtexSyntaxError",
    "CyclicVariableError",
    "ExpansionDepthError",
    "UndefinedVariableError",
    "exception_hint",
    "exception_messages",
]
