"""Resolved, read-only view over a parsed BibTeX file."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any


class Bibliography:
    """A bibliography record with every tag value fully expanded."""

    __slots__ = ("_citation_key", "_entry_type", "_tags")

    def __init__(self, entry_type: str, citation_key: str, tags: Mapping[str, str]) -> None:
        self._entry_type = entry_type
        self._citation_key = citation_key
        self._tags = dict(tags)

    @property
    def entry_type(self) -> str:
        """Publication type (article, book, ...) exactly as declared."""
        return self._entry_type

    @property
    def citation_key(self) -> str:
        """Key used to cite the record from a LaTeX document."""
        return self._citation_key

    @property
    def tags(self) -> dict[str, str]:
        """Return a copy of the lowercased tag mapping."""
        return dict(self._tags)

    def get(self, tag: str, default: str | None = None) -> str | None:
        """Return a tag value, matching the tag name case-insensitively."""
        return self._tags.get(tag.lower(), default)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self._citation_key,
            "type": self._entry_type,
            "fields": dict(self._tags),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bibliography):
            return NotImplemented
        return (
            self._entry_type == other._entry_type
            and self._citation_key == other._citation_key
            and self._tags == other._tags
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Bibliography(entry_type={self._entry_type!r}, "
            f"citation_key={self._citation_key!r}, tags={self._tags!r})"
        )


class Document:
    """Comments, preambles, string variables and bibliographies of a file."""

    __slots__ = ("_bibliographies", "_comments", "_preambles", "_variables")

    def __init__(
        self,
        *,
        comments: Iterable[str] = (),
        preambles: Iterable[str] = (),
        variables: Mapping[str, str] | None = None,
        bibliographies: Iterable[Bibliography] = (),
    ) -> None:
        self._comments = tuple(comments)
        self._preambles = tuple(preambles)
        self._variables = dict(variables or {})
        self._bibliographies = tuple(bibliographies)

    @property
    def comments(self) -> Sequence[str]:
        return self._comments

    @property
    def preambles(self) -> Sequence[str]:
        """Preambles in declaration order with abbreviations expanded."""
        return self._preambles

    @property
    def variables(self) -> dict[str, str]:
        """Return a snapshot of the expanded string variables."""
        return dict(self._variables)

    @property
    def bibliographies(self) -> Sequence[Bibliography]:
        return self._bibliographies

    def find(self, citation_key: str) -> Bibliography | None:
        """Return the first bibliography declared with ``citation_key``."""
        for bibliography in self._bibliographies:
            if bibliography.citation_key == citation_key:
                return bibliography
        return None

    def to_dict(self) -> dict[str, Any]:
        """Return a portable representation suitable for JSON or YAML dumps."""
        return {
            "comments": list(self._comments),
            "preambles": list(self._preambles),
            "variables": dict(sorted(self._variables.items())),
            "bibliographies": [entry.to_dict() for entry in self._bibliographies],
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return (
            self._comments == other._comments
            and self._preambles == other._preambles
            and self._variables == other._variables
            and self._bibliographies == other._bibliographies
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Document(comments={len(self._comments)}, preambles={len(self._preambles)}, "
            f"variables={len(self._variables)}, bibliographies={len(self._bibliographies)})"
        )


__all__ = ["Bibliography", "Document"]
