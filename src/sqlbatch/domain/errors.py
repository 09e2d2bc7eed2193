"""Unified error taxonomy for script loading, connectivity and execution."""

from dataclasses import dataclass


@dataclass(slots=True)
class SqlBatchError(Exception):
    """Base class for failures surfaced to the operator."""

    message: str
    code: str

    def __str__(self) -> str:
        return self.message


class ScriptSourceError(SqlBatchError):
    """Raised when a SQL script cannot be read. Fatal before any execution."""


class ConnectionCheckError(SqlBatchError):
    """Raised when the control-plane endpoint is unreachable."""


class BatchExecutionError(SqlBatchError):
    """Raised when a batch stops at a failing statement."""


class QueryError(SqlBatchError):
    """Raised when a read-only query against the control-plane fails."""
