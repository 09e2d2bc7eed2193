"""
Lexical scanner for SQL scripts.

Tracks just enough lexical state (quotes, comments, dollar-quoted bodies and
procedural block nesting) to tell whether a ``;`` really ends a statement.
This is not a SQL tokenizer; it never validates syntax.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Literal

_DOLLAR_TAG_RE = re.compile(r"\$(?:[A-Za-z_][A-Za-z0-9_]*)?\$")
_WORD_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_$]*")

# Words that follow BEGIN when it starts a transaction rather than a block
_TRANSACTION_BEGIN_FOLLOWERS = {"TRANSACTION", "WORK", "ISOLATION", "READ", "DEFERRABLE"}

# END <kw> closes a construct whose opener is not counted
_UNCOUNTED_END_SUFFIXES = {"IF", "LOOP", "WHILE", "REPEAT", "FOR"}


@dataclass
class ScanState:
    """Mutable lexical state for one scan pass over one script."""

    comment: Literal["line", "block"] | None = None
    quote: str | None = None
    pending_escape: bool = False
    block_depth: int = 0
    dollar_tags: list[str] = field(default_factory=list)

    @property
    def in_comment(self) -> bool:
        return self.comment is not None

    @property
    def in_quote(self) -> bool:
        return self.quote is not None

    @property
    def nesting_depth(self) -> int:
        return self.block_depth + len(self.dollar_tags)

    @property
    def at_top_level(self) -> bool:
        """True when a ``;`` at the current position would end a statement."""
        return self.nesting_depth == 0 and not self.in_comment and not self.in_quote


@dataclass(frozen=True, slots=True)
class ScanEvent:
    """Boundary event emitted by :func:`scan`.

    ``kind`` is ``"content"`` for the first significant character of a
    statement and ``"terminator"`` for a top-level ``;``.
    """

    kind: Literal["content", "terminator"]
    position: int


def _next_word_span(text: str, pos: int) -> tuple[int, int] | None:
    """Span of the identifier word after any whitespace at *pos*, if there is one."""
    n = len(text)
    while pos < n and text[pos].isspace():
        pos += 1
    match = _WORD_RE.match(text, pos)
    return match.span() if match else None


def _next_word(text: str, pos: int) -> str:
    span = _next_word_span(text, pos)
    return text[span[0] : span[1]] if span else ""


def _follows_identifier(text: str, pos: int) -> bool:
    prev = text[pos - 1] if pos > 0 else ""
    return prev.isalnum() or prev in ("_", "$")


def _is_transaction_begin(text: str, end: int) -> bool:
    n = len(text)
    pos = end
    while pos < n and text[pos].isspace():
        pos += 1
    if pos == n or text[pos] == ";":
        return True
    return _next_word(text, pos) in _TRANSACTION_BEGIN_FOLLOWERS


def _apply_keyword(state: ScanState, word: str, text: str, end: int) -> int:
    """Update nesting for *word* ending at *end*; return the position to resume at."""
    if word == "BEGIN":
        if not _is_transaction_begin(text, end):
            state.block_depth += 1
        return end

    if word == "CASE":
        state.block_depth += 1
        return end

    if word == "END":
        span = _next_word_span(text, end)
        suffix = text[span[0] : span[1]] if span else ""
        if span and suffix in _UNCOUNTED_END_SUFFIXES:
            return span[1]
        state.block_depth = max(0, state.block_depth - 1)
        if span and suffix == "CASE":
            return span[1]
        return end

    return end


def scan(text: str, state: ScanState | None = None) -> Iterator[ScanEvent]:
    """Walk *text* once and yield statement boundary events.

    A ``content`` event marks the first significant character (outside
    comments and whitespace) after the previous terminator; a ``terminator``
    event marks a ``;`` seen at top level. *state* is updated in place so the
    caller can inspect it after the pass.
    """
    state = state if state is not None else ScanState()
    in_statement = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if state.dollar_tags:
            if ch == "$":
                match = _DOLLAR_TAG_RE.match(text, i)
                if match:
                    tag = match.group(0)
                    if tag == state.dollar_tags[-1]:
                        state.dollar_tags.pop()
                    else:
                        state.dollar_tags.append(tag)
                    i = match.end()
                    continue
            i += 1
            continue

        if state.comment == "line":
            if ch == "\n":
                state.comment = None
            i += 1
            continue

        if state.comment == "block":
            if ch == "*" and nxt == "/":
                state.comment = None
                i += 2
                continue
            i += 1
            continue

        if state.pending_escape:
            state.pending_escape = False
            i += 1
            continue

        if ch == "\\":
            state.pending_escape = True
            i += 1
            continue

        if state.quote is not None:
            if ch == state.quote:
                state.quote = None
            i += 1
            continue

        if ch == "-" and nxt == "-":
            state.comment = "line"
            i += 2
            continue

        if ch == "/" and nxt == "*":
            state.comment = "block"
            i += 2
            continue

        if ch.isspace():
            i += 1
            continue

        if not in_statement and ch != ";":
            in_statement = True
            yield ScanEvent("content", i)

        if ch in ("'", '"'):
            state.quote = ch
            i += 1
            continue

        if ch == "$":
            # "$" inside an identifier such as "a$b$c" never opens a body
            match = None if _follows_identifier(text, i) else _DOLLAR_TAG_RE.match(text, i)
            if match:
                state.dollar_tags.append(match.group(0))
                i = match.end()
                continue
            i += 1
            continue

        match = _WORD_RE.match(text, i)
        if match:
            # identifiers such as "x$END" or "1END" are not keywords
            if _follows_identifier(text, i):
                i = match.end()
                continue
            i = _apply_keyword(state, match.group(0), text, match.end())
            continue

        if ch == ";" and state.at_top_level:
            yield ScanEvent("terminator", i)
            in_statement = False

        i += 1
