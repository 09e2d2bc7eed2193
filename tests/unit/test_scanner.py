"""Unit tests for the lexical scanner state machine."""

from sqlbatch.core.scanner import ScanEvent, ScanState, scan


def _scan(text: str) -> tuple[list[ScanEvent], ScanState]:
    state = ScanState()
    events = list(scan(text, state))
    return events, state


def test_events_mark_content_and_terminators() -> None:
    events, state = _scan("SELECT 1; SELECT 2")
    assert events == [
        ScanEvent("content", 0),
        ScanEvent("terminator", 8),
        ScanEvent("content", 10),
    ]
    assert state.at_top_level


def test_fresh_state_is_top_level() -> None:
    state = ScanState()
    assert state.nesting_depth == 0
    assert not state.in_comment
    assert not state.in_quote
    assert state.at_top_level


def test_open_quote_is_reported() -> None:
    _, state = _scan("SELECT 'open; still open")
    assert state.in_quote
    assert state.quote == "'"
    assert not state.at_top_level


def test_open_block_comment_is_reported() -> None:
    _, state = _scan("SELECT 1; /* never closed;")
    assert state.comment == "block"
    assert state.in_comment


def test_line_comment_ends_at_newline() -> None:
    _, state = _scan("SELECT 1; -- note\n")
    assert state.comment is None


def test_dollar_tags_form_a_stack() -> None:
    _, state = _scan("CREATE FUNCTION f() AS $outer$ SELECT $$ x;")
    assert state.dollar_tags == ["$outer$", "$$"]
    assert state.nesting_depth == 2

    _, state = _scan("CREATE FUNCTION f() AS $outer$ SELECT $$ x $$; $outer$")
    assert state.dollar_tags == []


def test_positional_parameter_is_not_a_dollar_tag() -> None:
    events, state = _scan("SELECT $1; SELECT $2;")
    assert state.dollar_tags == []
    assert [e.kind for e in events].count("terminator") == 2


def test_dollar_within_identifier_keeps_stack_empty() -> None:
    events, state = _scan("SELECT a$b$c FROM t; SELECT x$END$ FROM u;")
    assert state.dollar_tags == []
    assert state.block_depth == 0
    assert [e.kind for e in events].count("terminator") == 2


def test_transaction_begin_detected_across_whitespace() -> None:
    _, state = _scan("BEGIN \n\t  ISOLATION LEVEL SERIALIZABLE;")
    assert state.block_depth == 0

    _, state = _scan("BEGIN   ")
    assert state.block_depth == 0

    _, state = _scan("BEGIN \n UPDATE t SET a = 1;")
    assert state.block_depth == 1


def test_begin_end_depth_floors_at_zero() -> None:
    _, state = _scan("END; END; END;")
    assert state.block_depth == 0


def test_begin_block_increments_depth() -> None:
    _, state = _scan("CREATE TRIGGER t AFTER INSERT ON x BEGIN UPDATE y SET a = 1;")
    assert state.block_depth == 1


def test_keywords_are_case_sensitive() -> None:
    _, state = _scan("create trigger t after insert on x begin update y set a = 1;")
    assert state.block_depth == 0


def test_end_if_does_not_close_block() -> None:
    events, state = _scan("CREATE TRIGGER t BEGIN IF x THEN y; END IF; END;")
    assert state.block_depth == 0
    assert [e.kind for e in events].count("terminator") == 1


def test_end_case_closes_case_once() -> None:
    _, state = _scan("CREATE TRIGGER t BEGIN CASE x WHEN 1 THEN y; END CASE;")
    assert state.block_depth == 1


def test_pending_escape_skips_next_character() -> None:
    _, state = _scan("SELECT 'a\\'b")
    assert state.in_quote
    assert not state.pending_escape

    _, state = _scan("SELECT 'a\\")
    assert state.pending_escape
