from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from texbib.core.builder import DocumentBuilder
from texbib.core.config import ResolverConfig
from texbib.core.exceptions import UndefinedVariableError
from texbib.core.model import (
    Abbreviation,
    BibliographyEntry,
    CommentEntry,
    KeyValue,
    PreambleEntry,
    StringLiteral,
    VariableEntry,
)


class RecordingEmitter:
    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


def _tag(key: str, *fragments: StringLiteral | Abbreviation) -> KeyValue:
    return KeyValue.of(key, fragments)


def test_expand_prefers_variables_over_constants() -> None:
    builder = DocumentBuilder()

    assert builder.expand((Abbreviation("jan"),), {}) == "January"
    assert builder.expand((Abbreviation("jan"),), {"jan": "Janvier"}) == "Janvier"
    assert builder.expand((StringLiteral("1 "), Abbreviation("dec")), {}) == "1 December"


def test_expand_without_month_constants() -> None:
    builder = DocumentBuilder(ResolverConfig(expand_months=False))

    with pytest.raises(UndefinedVariableError) as excinfo:
        builder.expand((Abbreviation("jan"),), {})

    assert excinfo.value.name == "jan"


def test_month_lookup_is_exact() -> None:
    with pytest.raises(UndefinedVariableError):
        DocumentBuilder().expand((Abbreviation("Jan"),), {})


def test_build_dispatches_every_entry_kind() -> None:
    entries = [
        CommentEntry("first comment"),
        VariableEntry(_tag("inst", StringLiteral("MIT"))),
        PreambleEntry((StringLiteral("\\def\\inst{"), Abbreviation("inst"), StringLiteral("}"))),
        BibliographyEntry(
            "TechReport",
            "MIT-TR-1",
            (_tag("Institution", Abbreviation("inst")), _tag("month", Abbreviation("oct"))),
        ),
        CommentEntry("second comment"),
    ]

    document = DocumentBuilder().build(entries)

    assert document.comments == ("first comment", "second comment")
    assert document.preambles == ("\\def\\inst{MIT}",)
    assert document.variables == {"inst": "MIT"}
    (record,) = document.bibliographies
    assert record.entry_type == "TechReport"
    assert record.citation_key == "MIT-TR-1"
    assert record.tags == {"institution": "MIT", "month": "October"}


def test_case_folded_tags_keep_the_last_value() -> None:
    entries = [
        BibliographyEntry(
            "article",
            "k",
            (
                _tag("Author", StringLiteral("First")),
                _tag("title", StringLiteral("T")),
                _tag("author", StringLiteral("Second")),
            ),
        )
    ]

    (record,) = DocumentBuilder().build(entries).bibliographies

    assert record.tags == {"author": "Second", "title": "T"}


def test_undefined_tag_reference_aborts_the_build() -> None:
    entries = [
        BibliographyEntry("article", "k", (_tag("journal", Abbreviation("jacm")),)),
    ]

    with pytest.raises(UndefinedVariableError) as excinfo:
        DocumentBuilder().build(entries)

    assert excinfo.value.name == "jacm"


def test_undefined_preamble_reference_aborts_the_build() -> None:
    with pytest.raises(UndefinedVariableError):
        DocumentBuilder().build([PreambleEntry((Abbreviation("nowhere"),))])


def test_build_emits_summary_events() -> None:
    emitter = RecordingEmitter()
    entries = [
        VariableEntry(_tag("a", StringLiteral("x"))),
        VariableEntry(_tag("b", Abbreviation("a"))),
        BibliographyEntry("misc", "k"),
    ]

    DocumentBuilder(emitter=emitter).build(entries)

    assert emitter.events == [
        ("variables_resolved", {"count": 2}),
        ("document_built", {"comments": 0, "preambles": 0, "bibliographies": 1}),
    ]


def test_build_uses_configured_depth() -> None:
    entries = [
        VariableEntry(_tag("a", Abbreviation("b"))),
        VariableEntry(_tag("b", StringLiteral("x"))),
    ]

    document = DocumentBuilder(ResolverConfig(max_depth=2)).build(entries)

    assert document.variables == {"a": "x", "b": "x"}
