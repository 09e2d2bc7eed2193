"""
Apply Command Implementation

Pushes a SQL script to the control-plane. Small scripts go out in one call;
scripts above the size threshold are split into statements and executed one
by one, stopping at the first failure.
"""

import time
from enum import Enum
from pathlib import Path

import requests
from rich.console import Console
from rich.markup import escape

from sqlbatch.core.script_source import load_sql_file
from sqlbatch.core.sql_utils import split_sql_statements
from sqlbatch.domain.errors import BatchExecutionError, ConnectionCheckError
from sqlbatch.providers.base.executor import ExecutionResult
from sqlbatch.providers.control_plane.client import ControlPlaneClient
from sqlbatch.providers.control_plane.executor import ControlPlaneSQLExecutor
from sqlbatch.settings import DEFAULT_SIZE_THRESHOLD

console = Console()


class BatchState(str, Enum):
    NOT_STARTED = "not_started"
    CONNECTING = "connecting"
    SINGLE_SHOT = "single_shot"
    SPLITTING = "splitting"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


class BatchExecutor:
    """Orchestrates splitting and sequential execution of one script

    Attributes:
        client: Control-plane client shared by every statement of the batch
        size_threshold: Scripts longer than this many characters are split
        state: Current position in the batch lifecycle
    """

    def __init__(
        self,
        client: ControlPlaneClient,
        *,
        size_threshold: int = DEFAULT_SIZE_THRESHOLD,
        executor: ControlPlaneSQLExecutor | None = None,
    ) -> None:
        self.client = client
        self.size_threshold = size_threshold
        self.executor = executor or ControlPlaneSQLExecutor(client)
        self.state = BatchState.NOT_STARTED

    def check_connection(self, schema: str = "public") -> list[dict]:
        """Probe the endpoint before anything is executed

        The health probe is best-effort; the table listing must succeed.

        Returns:
            Table descriptors found in *schema*

        Raises:
            ConnectionCheckError: If the endpoint cannot be reached
        """
        self.state = BatchState.CONNECTING
        console.print("Testing connection to control-plane...")
        console.print(f"  Project reference: {self.client.project_ref}")
        console.print(f"  URL: {self.client.base_url}")

        if self.client.health():
            console.print("  Health check: [green]OK[/green]")
        else:
            console.print("  [yellow]Health check failed. Continuing anyway...[/yellow]")

        try:
            tables = self.client.get_tables(schema)
        except requests.RequestException as e:
            self.state = BatchState.FAILED
            raise ConnectionCheckError(
                f"Connection test failed for {self.client.base_url}: {e}", "connection"
            ) from e

        console.print("[green]✓[/green] Connection successful!")
        console.print(f"  Found {len(tables)} tables")
        if tables:
            names = ", ".join(str(t.get("name")) for t in tables)
            console.print(f"  Existing tables: {names}", markup=False)
        return tables

    def plan(self, sql: str) -> list[str]:
        """Return the statements to send for *sql*, recording the routing decision."""
        if len(sql) > self.size_threshold:
            self.state = BatchState.SPLITTING
            console.print(
                f"SQL is large ({len(sql)} chars), executing in smaller chunks..."
            )
            return split_sql_statements(sql)
        self.state = BatchState.SINGLE_SHOT
        return [sql]

    def run(self, sql: str) -> ExecutionResult:
        """Execute *sql* and return the batch result (never raises on SQL errors)."""
        statements = self.plan(sql)
        mode = "split" if self.state == BatchState.SPLITTING else "single"

        self.state = BatchState.EXECUTING
        console.print(f"Executing SQL with project ref: {self.client.project_ref}")
        result = self.executor.execute_statements(statements)
        result = result.model_copy(update={"mode": mode})

        if result.succeeded:
            self.state = BatchState.COMPLETED
            console.print("[green]✓[/green] SQL executed successfully")
        else:
            self.state = BatchState.FAILED
        return result


def apply_script(
    client: ControlPlaneClient,
    script_path: Path,
    *,
    size_threshold: int = DEFAULT_SIZE_THRESHOLD,
    check_connection: bool = True,
) -> ExecutionResult:
    """Apply one SQL file to the project behind *client*

    Raises:
        ScriptSourceError: If the file cannot be read
        ConnectionCheckError: If the endpoint is unreachable
        BatchExecutionError: If a statement fails
    """
    batch = BatchExecutor(client, size_threshold=size_threshold)
    if check_connection:
        batch.check_connection()

    sql = load_sql_file(script_path)
    start = time.perf_counter()
    result = batch.run(sql)
    if not result.succeeded:
        raise BatchExecutionError(describe_failure(script_path.name, result), "execution")

    duration = time.perf_counter() - start
    console.print(
        f"[green]✓[/green] Applied {escape(script_path.name)} "
        f"({result.total_statements} statement(s), {duration:.2f}s)"
    )
    return result


def describe_failure(label: str, result: ExecutionResult) -> str:
    """One-line summary of a failed batch for the operator."""
    parts = [
        f"{label}: failed at statement "
        f"{result.failed_statement_index}/{result.total_statements}",
        f"error: {result.error_message}",
    ]
    if result.error_detail:
        parts.append(f"details: {result.error_detail}")
    if result.failed_statement_preview:
        parts.append(f"statement: {result.failed_statement_preview}")
    return " | ".join(parts)
