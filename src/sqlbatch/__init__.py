"""
sqlbatch

Split SQL scripts into statements and push them, in order, to a remote
SQL-execution control-plane.
"""

__version__ = "0.1.0"

from .commands import BatchExecutor, apply_script, initialize_database
from .core import split_sql_statements
from .providers.base import ExecutionResult, StatementOutcome
from .providers.control_plane import ControlPlaneClient

__all__ = [
    "__version__",
    "BatchExecutor",
    "apply_script",
    "initialize_database",
    "split_sql_statements",
    "ExecutionResult",
    "StatementOutcome",
    "ControlPlaneClient",
]
