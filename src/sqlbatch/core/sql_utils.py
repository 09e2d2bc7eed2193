"""
SQL utilities - helpers for turning a SQL script into executable statements.

Single source of truth for splitting script text into statements before they
are pushed to the control-plane one at a time. No dialect dependency beyond
the PostgreSQL-flavoured lexical rules in :mod:`sqlbatch.core.scanner`.
"""

from collections.abc import Iterator

from sqlbatch.core.scanner import ScanState, scan

PREVIEW_LIMIT = 200


def iter_sql_statements(sql_text: str) -> Iterator[str]:
    """Lazily yield the statements of *sql_text* in script order.

    Each statement runs from its first significant character up to and
    including its terminating ``;``. Comments between statements are not part
    of any statement. A trailing statement without ``;`` (or one left open by
    an unterminated quote, comment or body) is still yielded.
    """
    start: int | None = None

    for event in scan(sql_text, ScanState()):
        if event.kind == "content":
            start = event.position
        elif start is not None:
            statement = sql_text[start : event.position + 1].strip()
            if statement:
                yield statement
            start = None

    if start is not None:
        tail = sql_text[start:].strip()
        if tail:
            yield tail


def split_sql_statements(sql_text: str) -> list[str]:
    """Split SQL script into statements, keeping nested semicolons intact.

    Semicolons inside quoted strings, quoted identifiers, comments,
    dollar-quoted bodies (``$$ ... $$`` or ``$tag$ ... $tag$``) and
    ``BEGIN ... END`` blocks do not end a statement. Never raises; ambiguous
    input degrades to over- or under-splitting.

    Args:
        sql_text: Raw SQL script content (e.g. from a file).

    Returns:
        List of non-empty statement strings, in order.
    """
    return list(iter_sql_statements(sql_text))


def preview_statement(sql: str, limit: int = PREVIEW_LIMIT) -> str:
    """Return *sql* cut to *limit* characters, marking truncation with '...'."""
    if len(sql) > limit:
        return sql[:limit] + "..."
    return sql
