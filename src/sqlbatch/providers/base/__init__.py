"""Provider-agnostic execution models and protocols."""

from .executor import ExecutionResult, SQLExecutor, StatementOutcome

__all__ = ["ExecutionResult", "SQLExecutor", "StatementOutcome"]
