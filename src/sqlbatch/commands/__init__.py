"""
sqlbatch CLI Commands

Modular command implementations for the sqlbatch CLI.
The CLI layer (cli.py) acts as a thin routing layer.
"""

from .apply import BatchExecutor, BatchState, apply_script, describe_failure
from .init_db import initialize_database
from .status import DatabaseStatus, check_database_status, print_database_status

__all__ = [
    "apply_script",
    "BatchExecutor",
    "BatchState",
    "describe_failure",
    "initialize_database",
    "check_database_status",
    "print_database_status",
    "DatabaseStatus",
]
