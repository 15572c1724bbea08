from __future__ import annotations

import logging

import pytest

from docxref.core.diagnostics import (
    DiagnosticEmitter,
    LoggingEmitter,
    NullEmitter,
    format_event_message,
)
from docxref.core.exceptions import (
    FragmentParseError,
    IndexConfigError,
    XrefIndexError,
    exception_hint,
    exception_messages,
)
from docxref.ui.cli.diagnostics import CliEmitter, summarise_problems
from docxref.ui.cli.state import CLIState, emit_error, set_cli_state


def test_emitters_satisfy_protocol() -> None:
    assert isinstance(NullEmitter(), DiagnosticEmitter)
    assert isinstance(LoggingEmitter(), DiagnosticEmitter)
    assert isinstance(CliEmitter(state=CLIState()), DiagnosticEmitter)


@pytest.mark.parametrize(
    ("name", "payload", "expected"),
    [
        (
            "contribution_dropped",
            {"key": "core::ops::arith::Neg", "origin": "time", "reason": "bad"},
            "Dropped contribution from 'time' for 'core::ops::arith::Neg': bad",
        ),
        ("gate_flushed", {"bucket": "sidebar", "count": 1}, "Flushed 1 pending sidebar contribution"),
        ("gate_flushed", {"count": 3}, "Flushed 3 pending contributions"),
        ("fragment_loaded", {"key": "bson::document", "accepted": 3}, "Loaded bson::document (3 accepted)"),
        ("fragment_skipped", {"path": "a.js"}, "Skipped fragment a.js (unreadable)"),
        ("something_else", {}, None),
    ],
)
def test_format_event_message(name: str, payload: dict, expected: str | None) -> None:
    assert format_event_message(name, payload) == expected


def test_logging_emitter_routes_records(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(logger_obj=logging.getLogger("docxref.test"))
    with caplog.at_level(logging.DEBUG, logger="docxref.test"):
        emitter.warning("careful", ValueError("detail"))
        emitter.event("gate_flushed", {"bucket": "implementors", "count": 2})
        emitter.event("custom", {"value": 1})

    levels = [(record.levelno, record.getMessage()) for record in caplog.records]
    assert levels[0] == (logging.WARNING, "careful")
    assert caplog.records[0].exc_info is None
    assert levels[1] == (logging.INFO, "Flushed 2 pending implementors contributions")
    assert levels[2][0] == logging.DEBUG


def test_logging_emitter_attaches_tracebacks_in_debug(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(logger_obj=logging.getLogger("docxref.test"), debug_enabled=True)
    with caplog.at_level(logging.WARNING, logger="docxref.test"):
        emitter.warning("careful", ValueError("detail"))
    assert caplog.records[0].exc_info is not None


def test_cli_emitter_records_data_loss_for_the_summary(
    capsys: pytest.CaptureFixture[str],
) -> None:
    state = CLIState()
    emitter = CliEmitter(state=state)
    emitter.warning("Dropping contribution from 'time' for 'Neg': bad")
    emitter.event("contribution_dropped", {"key": "Neg", "origin": "time", "reason": "bad"})
    emitter.event("fragment_loaded", {"key": "Neg", "accepted": 0})

    assert capsys.readouterr().err == ""
    assert state.consume_events("contribution_dropped") == [
        {"key": "Neg", "origin": "time", "reason": "bad"}
    ]
    assert state.consume_events("fragment_loaded") == []


def test_cli_emitter_prints_warnings_when_verbose(capsys: pytest.CaptureFixture[str]) -> None:
    state = CLIState(verbosity=1)
    set_cli_state(verbosity=1)
    CliEmitter(state=state).warning("Dropping contribution from 'time'")

    assert "warning: Dropping contribution from 'time'" in capsys.readouterr().err


def test_summarise_problems_counts_keys(capsys: pytest.CaptureFixture[str]) -> None:
    set_cli_state(verbosity=0)
    state = CLIState()
    state.record_event("contribution_dropped", {"key": "Neg", "origin": "a"})
    state.record_event("contribution_dropped", {"key": "Neg", "origin": "b"})
    state.record_event("contribution_dropped", {"key": "Iterator", "origin": "c"})

    summarise_problems(state, issues=1)
    err = capsys.readouterr().err

    assert "Dropped 3 malformed contribution(s) under 2 key(s)." in err
    assert "Ignored 1 undecodable assignment(s)." in err
    assert "could not be loaded" not in err
    assert state.events == {}


def _chained_error() -> FragmentParseError:
    try:
        try:
            raise ValueError("Expecting value")
        except ValueError as inner:
            raise FragmentParseError("Invalid sidebar payload.") from inner
    except FragmentParseError as exc:
        return exc


@pytest.mark.parametrize(
    ("verbosity", "expected", "absent"),
    [
        (0, ["error: Invalid sidebar payload.", "cause: Expecting value"], ["type:"]),
        (1, ["type: FragmentParseError"], ["caused by:"]),
        (2, ["caused by:", "  Expecting value"], []),
    ],
)
def test_render_message_details_follow_verbosity(
    capsys: pytest.CaptureFixture[str], verbosity: int, expected: list[str], absent: list[str]
) -> None:
    set_cli_state(verbosity=verbosity)
    emit_error("Invalid sidebar payload.", exception=_chained_error())
    err = capsys.readouterr().err

    for line in expected:
        assert line in err
    for line in absent:
        assert line not in err


def test_exception_hierarchy() -> None:
    assert issubclass(FragmentParseError, XrefIndexError)
    assert issubclass(IndexConfigError, XrefIndexError)
    assert issubclass(XrefIndexError, RuntimeError)


def test_exception_messages_follow_causes() -> None:
    try:
        try:
            raise ValueError("Expecting value: line 1 column 2\nmore")
        except ValueError as inner:
            raise FragmentParseError("Invalid sidebar payload.") from inner
    except FragmentParseError as exc:
        error = exc

    assert exception_messages(error) == [
        "Invalid sidebar payload.",
        "Expecting value: line 1 column 2",
    ]
    assert exception_hint(error) == "Expecting value: line 1 column 2"
    assert exception_hint(RuntimeError("")) is None
