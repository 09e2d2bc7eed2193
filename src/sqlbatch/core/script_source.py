"""Reading SQL scripts from disk."""

from pathlib import Path

from sqlbatch.domain.errors import ScriptSourceError


def load_sql_file(path: Path) -> str:
    """Read a SQL script as UTF-8 text.

    Raises:
        ScriptSourceError: If the file is missing or unreadable.
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ScriptSourceError(f"Error reading SQL file {path}: {e}", "script_source") from e
