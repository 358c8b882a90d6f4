"""Raw syntactic entries produced by the grammar.

These types only live for the duration of a parse: the resolver and the
document builder consume them and keep nothing but plain strings.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Span:
    """Location of a piece of input text."""

    start: int
    end: int
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class StringLiteral:
    """Literal text copied verbatim into the resolved value."""

    text: str


@dataclass(frozen=True, slots=True)
class Abbreviation:
    """Reference to a string variable or built-in constant."""

    name: str


StringFragment = StringLiteral | Abbreviation


@dataclass(frozen=True, slots=True)
class KeyValue:
    """A ``key = value`` pair with the value kept as unresolved fragments."""

    key: str
    value: tuple[StringFragment, ...] = ()

    @classmethod
    def of(cls, key: str, fragments: Iterable[StringFragment]) -> KeyValue:
        return cls(key, tuple(fragments))


@dataclass(frozen=True, slots=True)
class VariableEntry:
    """``@string{name = value}`` definition."""

    variable: KeyValue
    span: Span | None = field(default=None, compare=False)

    @property
    def name(self) -> str:
        return self.variable.key


@dataclass(frozen=True, slots=True)
class CommentEntry:
    """``@comment`` block or free text found between entries."""

    text: str
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class PreambleEntry:
    """``@preamble{...}`` block."""

    value: tuple[StringFragment, ...]
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class BibliographyEntry:
    """Bibliography record such as ``@article{key, ...}``."""

    entry_type: str
    citation_key: str
    tags: tuple[KeyValue, ...] = ()
    span: Span | None = field(default=None, compare=False)


RawEntry = VariableEntry | CommentEntry | PreambleEntry | BibliographyEntry


__all__ = [
    "Abbreviation",
    "BibliographyEntry",
    "CommentEntry",
    "KeyValue",
    "PreambleEntry",
    "RawEntry",
    "Span",
    "StringFragment",
    "StringLiteral",
    "VariableEntry",
]
