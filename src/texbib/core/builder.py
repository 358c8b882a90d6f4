"""Assemble a resolved ``Document`` from the raw entry stream."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .config import ResolverConfig
from .constants import lookup_constant
from .diagnostics import DiagnosticEmitter, NullEmitter
from .document import Bibliography, Document
from .exceptions import UndefinedVariableError
from .model import (
    Abbreviation,
    BibliographyEntry,
    CommentEntry,
    PreambleEntry,
    RawEntry,
    StringFragment,
    StringLiteral,
    VariableEntry,
)
from .resolver import VariableResolver


class DocumentBuilder:
    """Walk raw entries in order and expand preambles and tags."""

    def __init__(
        self,
        config: ResolverConfig | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.config = config or ResolverConfig()
        self._emitter = emitter or NullEmitter()

    def build(self, entries: Sequence[RawEntry]) -> Document:
        resolver = VariableResolver(max_depth=self.config.max_depth, emitter=self._emitter)
        variables = resolver.resolve(entries)
        self._emitter.event("variables_resolved", {"count": len(variables)})

        comments: list[str] = []
        preambles: list[str] = []
        bibliographies: list[Bibliography] = []

        for entry in entries:
            match entry:
                case VariableEntry():
                    continue
                case CommentEntry(text=text):
                    comments.append(text)
                case PreambleEntry(value=value):
                    preambles.append(self.expand(value, variables))
                case BibliographyEntry():
                    bibliographies.append(self._bibliography(entry, variables))
                case _:
                    raise TypeError(f"Unsupported raw entry: {entry!r}")

        document = Document(
            comments=comments,
            preambles=preambles,
            variables=variables,
            bibliographies=bibliographies,
        )
        self._emitter.event(
            "document_built",
            {
                "comments": len(comments),
                "preambles": len(preambles),
                "bibliographies": len(bibliographies),
            },
        )
        return document

    def expand(self, fragments: Sequence[StringFragment], variables: Mapping[str, str]) -> str:
        """Expand fragments against resolved variables, then built-in constants."""
        parts: list[str] = []
        for fragment in fragments:
            match fragment:
                case StringLiteral(text=text):
                    parts.append(text)
                case Abbreviation(name=name):
                    parts.append(self._lookup(name, variables))
                case _:
                    raise TypeError(f"Unsupported string fragment: {fragment!r}")
        return "".join(parts)

    def _lookup(self, name: str, variables: Mapping[str, str]) -> str:
        value = variables.get(name)
        if value is not None:
            return value
        if self.config.expand_months:
            constant = lookup_constant(name)
            if constant is not None:
                return constant
        raise UndefinedVariableError(name)

    def _bibliography(
        self, entry: BibliographyEntry, variables: Mapping[str, str]
    ) -> Bibliography:
        tags: dict[str, str] = {}
        for tag in entry.tags:
            # Tag names are case-insensitive; a later duplicate overwrites.
            tags[tag.key.lower()] = self.expand(tag.value, variables)
        return Bibliography(entry.entry_type, entry.citation_key, tags)


__all__ = ["DocumentBuilder"]
