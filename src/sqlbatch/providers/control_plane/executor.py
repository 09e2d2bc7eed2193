"""
Control-plane SQL Executor

Executes SQL statements one at a time through the control-plane
``execute_postgresql`` endpoint with fail-fast behavior.
"""

import time

from rich.console import Console
from rich.markup import escape

from sqlbatch.core.sql_utils import preview_statement
from sqlbatch.providers.base.executor import ExecutionResult, StatementOutcome
from sqlbatch.providers.control_plane.client import ControlPlaneClient

console = Console()


class ControlPlaneSQLExecutor:
    """Execute SQL statements sequentially against the control-plane

    Each statement is sent and its outcome awaited before the next one goes
    out. The first failure stops the batch; later statements are never sent.

    Attributes:
        client: Control-plane client bound to one project
    """

    def __init__(self, client: ControlPlaneClient) -> None:
        self.client = client

    def execute_statements(self, statements: list[str]) -> ExecutionResult:
        """Execute SQL statements sequentially with fail-fast behavior

        Args:
            statements: Statements to execute, in script order

        Returns:
            ExecutionResult; on failure it carries the 1-based index of the
            failing statement, a truncated preview and the endpoint's error
        """
        results: list[StatementOutcome] = []
        total = len(statements)
        start_time = time.time()

        if total > 1:
            console.print(f"\n[bold cyan]Executing {total} SQL statements in batches...[/bold cyan]\n")

        for i, sql in enumerate(statements, 1):
            if total > 1:
                console.print(f"[cyan]Executing statement {i}/{total}...[/cyan]")

            outcome = self.client.execute_sql(sql).model_copy(
                update={"statement_index": i, "total_statements": total}
            )
            results.append(outcome)

            if outcome.succeeded:
                console.print(
                    f"  [green]✓[/green] Completed in {outcome.execution_time_ms / 1000:.2f}s"
                )
                continue

            # Fail-fast: stop on first error
            preview = preview_statement(sql)
            self._report_failure(outcome, preview)
            successful_count = i - 1
            return ExecutionResult(
                total_statements=total,
                successful_statements=successful_count,
                failed_statement_index=i,
                failed_statement_preview=preview,
                statement_results=results,
                total_execution_time_ms=int((time.time() - start_time) * 1000),
                status="failed" if successful_count == 0 else "partial",
                error_message=outcome.error_message,
                error_detail=outcome.error_detail,
            )

        return ExecutionResult(
            total_statements=total,
            successful_statements=total,
            statement_results=results,
            total_execution_time_ms=int((time.time() - start_time) * 1000),
            status="success",
        )

    @staticmethod
    def _report_failure(outcome: StatementOutcome, preview: str) -> None:
        console.print(f"  [red]✗[/red] SQL Execution Error: {escape(outcome.error_message or '')}")
        if outcome.error_detail:
            console.print(f"    Error Details: {outcome.error_detail}", markup=False)
        console.print(
            f"[red]Failed at statement {outcome.statement_index}/{outcome.total_statements}[/red]"
        )
        console.print(f"  Statement: {preview}", markup=False)
