"""
Base SQL Executor Protocol

Defines the result models and the contract for executing SQL statements
against a remote endpoint. Executors run statements strictly in order and
stop at the first failure.
"""

from typing import Literal, Protocol

from pydantic import BaseModel, Field


class StatementOutcome(BaseModel):
    """Result of one call to the execution endpoint

    Attributes:
        statement_index: 1-based position of the statement in its batch
        total_statements: Number of statements in the batch
        sql: The SQL text that was sent
        succeeded: False for both transport and logical failures
        error_message: Human-readable error if the call failed
        error_detail: Extra detail returned by the endpoint, if any
        execution_time_ms: Round-trip time in milliseconds
    """

    statement_index: int = Field(default=1, description="1-based statement index")
    total_statements: int = Field(default=1, description="Statements in the batch")
    sql: str = Field(..., description="SQL statement")
    succeeded: bool = Field(..., description="Whether the statement succeeded")
    error_message: str | None = Field(None, description="Error message if failed")
    error_detail: str | None = Field(None, description="Error details if failed")
    execution_time_ms: int = Field(default=0, description="Execution time in milliseconds")


class ExecutionResult(BaseModel):
    """Result of a full batch

    Attributes:
        total_statements: Total number of statements in the batch
        successful_statements: Number of statements that succeeded
        failed_statement_index: 1-based index of the failing statement (if any)
        failed_statement_preview: First 200 characters of the failing statement
        statement_results: Outcomes for every statement that was sent
        mode: "single" when the script went out whole, "split" otherwise
        total_execution_time_ms: Total execution time in milliseconds
        status: Overall execution status
        error_message: Error of the failing statement
        error_detail: Detail of the failing statement
    """

    total_statements: int = Field(..., description="Total statements")
    successful_statements: int = Field(default=0, description="Successful statements")
    failed_statement_index: int | None = Field(None, description="First failed statement index")
    failed_statement_preview: str | None = Field(None, description="Truncated failing statement")
    statement_results: list[StatementOutcome] = Field(
        default_factory=list, description="Statement outcomes"
    )
    mode: Literal["single", "split"] = Field(default="split", description="Routing decision")
    total_execution_time_ms: int = Field(default=0, description="Total execution time (ms)")
    status: Literal["success", "failed", "partial"] = Field(..., description="Overall status")
    error_message: str | None = Field(None, description="Error summary")
    error_detail: str | None = Field(None, description="Error details")

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


class SQLExecutor(Protocol):
    """Protocol for executing an ordered list of SQL statements

    Implementations send one statement at a time, wait for its outcome, and
    never send a statement after the first failing one.
    """

    def execute_statements(self, statements: list[str]) -> ExecutionResult:
        """Execute SQL statements sequentially

        Args:
            statements: Statements to execute, in script order

        Returns:
            ExecutionResult describing how far the batch got
        """
        ...
