"""Script handling: lexical scanning, statement splitting and file loading."""

from .scanner import ScanEvent, ScanState, scan
from .script_source import load_sql_file
from .sql_utils import iter_sql_statements, preview_statement, split_sql_statements

__all__ = [
    "ScanEvent",
    "ScanState",
    "scan",
    "load_sql_file",
    "iter_sql_statements",
    "preview_statement",
    "split_sql_statements",
]
