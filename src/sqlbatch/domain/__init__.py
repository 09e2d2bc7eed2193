"""Domain-level error types."""

from .errors import (
    BatchExecutionError,
    ConnectionCheckError,
    QueryError,
    ScriptSourceError,
    SqlBatchError,
)

__all__ = [
    "SqlBatchError",
    "ScriptSourceError",
    "ConnectionCheckError",
    "BatchExecutionError",
    "QueryError",
]
