"""Conversion of resolved documents into pybtex data structures."""

from __future__ import annotations

from pybtex.bibtex.utils import split_name_list
from pybtex.database import BibliographyData, Entry, Person
from pybtex.exceptions import PybtexError

from .diagnostics import DiagnosticEmitter, NullEmitter
from .document import Document


PERSON_ROLES = ("author", "editor")


def to_bibliography_data(
    document: Document,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> BibliographyData:
    """Return a ``BibliographyData`` holding every record of ``document``.

    Name lists found in ``author`` and ``editor`` become ``Person`` objects;
    a list pybtex cannot split into names is kept as a plain field.
    Citation keys are compared case-insensitively, as pybtex does, and the
    first record of a repeated key is kept.
    """
    active_emitter = emitter or NullEmitter()
    entries: dict[str, Entry] = {}
    seen: dict[str, str] = {}
    for bibliography in document.bibliographies:
        key = bibliography.citation_key
        folded = key.lower()
        if folded in seen:
            active_emitter.warning(
                f"Duplicate citation key '{key}' (already defined as '{seen[folded]}'); "
                "ignoring the newer definition."
            )
            continue
        seen[folded] = key

        fields: dict[str, str] = {}
        persons: dict[str, list[Person]] = {}
        for tag, value in bibliography.tags.items():
            if tag not in PERSON_ROLES:
                fields[tag] = value
                continue
            try:
                persons[tag] = _split_persons(value)
            except PybtexError as exc:
                active_emitter.warning(
                    f"Unable to split {tag} names of '{key}': {exc}; keeping the raw value.",
                    exc,
                )
                fields[tag] = value
        entries[key] = Entry(bibliography.entry_type, fields=fields, persons=persons)

    return BibliographyData(entries=entries, preamble=list(document.preambles))


def _split_persons(value: str) -> list[Person]:
    return [Person(name) for name in split_name_list(value) if name.strip()]


__all__ = ["PERSON_ROLES", "to_bibliography_data"]
