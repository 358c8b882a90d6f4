from __future__ import annotations

import logging

import pytest

from texbib import parse
from texbib.core.diagnostics import (
    DiagnosticEmitter,
    LoggingEmitter,
    NullEmitter,
    format_event_message,
)
from texbib.core.exceptions import (
    BibtexError,
    UndefinedVariableError,
    exception_hint,
    exception_messages,
)
from texbib.ui.cli.diagnostics import CliEmitter


def _raise_nested_error() -> None:
    try:
        raise UndefinedVariableError("jacm")
    except UndefinedVariableError as exc:
        raise BibtexError("resolution failed") from exc


def test_null_emitter_is_noop(caplog: pytest.LogCaptureFixture) -> None:
    emitter = NullEmitter()
    with caplog.at_level(logging.DEBUG):
        emitter.warning("nothing to see")
        emitter.event("ignored", {"value": 1})
    assert not caplog.records


def test_emitters_satisfy_the_protocol() -> None:
    assert isinstance(NullEmitter(), DiagnosticEmitter)
    assert isinstance(LoggingEmitter(), DiagnosticEmitter)
    assert isinstance(CliEmitter(), DiagnosticEmitter)


def test_logging_emitter_uses_the_given_logger(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(logger_obj=logging.getLogger("texbib.custom"))
    with caplog.at_level(logging.DEBUG, logger="texbib.custom"):
        emitter.warning("careful")
        emitter.event("unknown", {"value": 1})
    assert [(record.name, record.levelno) for record in caplog.records] == [
        ("texbib.custom", logging.WARNING),
        ("texbib.custom", logging.DEBUG),
    ]
    assert caplog.records[1].message == "diagnostic event unknown: {'value': 1}"


def test_logging_emitter_reports_pipeline_events(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="texbib"):
        parse('@string{a = "x"}\n@misc{k, note = a}', emitter=LoggingEmitter())

    messages = [record.message for record in caplog.records]
    assert "Resolved 1 string variable" in messages
    assert "Built document (1 bibliographies)" in messages


def test_logging_emitter_warns_on_redefinition(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="texbib"):
        parse('@string{a = "x"}\n@string{a = "y"}', emitter=LoggingEmitter())

    assert any("'a' is defined more than once" in record.message for record in caplog.records)


def test_format_event_message() -> None:
    assert format_event_message("variables_resolved", {"count": 3}) == "Resolved 3 string variables"
    assert (
        format_event_message(
            "document_built", {"comments": 2, "preambles": 0, "bibliographies": 5}
        )
        == "Built document (5 bibliographies, 2 comments)"
    )
    assert format_event_message("document_built", {}) == "Built document (empty document)"
    assert format_event_message("unknown", {}) is None


def test_exception_helpers_walk_the_chain() -> None:
    with pytest.raises(BibtexError) as excinfo:
        _raise_nested_error()

    assert exception_messages(excinfo.value) == [
        "resolution failed",
        "String variable 'jacm' is not defined.",
    ]
    assert exception_hint(excinfo.value) == "String variable 'jacm' is not defined."
