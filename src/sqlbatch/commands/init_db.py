"""
Init-DB Command Implementation

Tests the connection, then pushes the schema script followed by the seed
data script. Both files are read before anything is executed, and the seed
is never sent when the schema fails.
"""

from pathlib import Path

from rich.console import Console

from sqlbatch.commands.apply import BatchExecutor, describe_failure
from sqlbatch.core.script_source import load_sql_file
from sqlbatch.domain.errors import BatchExecutionError
from sqlbatch.providers.base.executor import ExecutionResult
from sqlbatch.providers.control_plane.client import ControlPlaneClient
from sqlbatch.settings import DEFAULT_SIZE_THRESHOLD

console = Console()


def initialize_database(
    client: ControlPlaneClient,
    schema_path: Path,
    seed_path: Path,
    *,
    size_threshold: int = DEFAULT_SIZE_THRESHOLD,
    check_connection: bool = True,
) -> dict[str, ExecutionResult]:
    """Create the schema and load seed data

    Args:
        client: Control-plane client for the target project
        schema_path: Schema script
        seed_path: Seed data script
        size_threshold: Scripts longer than this are split before sending
        check_connection: Probe the endpoint first

    Returns:
        Results keyed by "schema" and "seed"

    Raises:
        ConnectionCheckError: If the endpoint is unreachable
        ScriptSourceError: If either file cannot be read
        BatchExecutionError: If the schema or the seed fails
    """
    console.print("[bold]Starting database initialization...[/bold]")
    console.print(f"  Project reference: {client.project_ref}")
    console.print(f"  URL: {client.base_url}")

    if check_connection:
        BatchExecutor(client, size_threshold=size_threshold).check_connection()

    scripts = [
        ("schema", "Creating database schema...", load_sql_file(schema_path)),
        ("seed", "Seeding initial data...", load_sql_file(seed_path)),
    ]

    results: dict[str, ExecutionResult] = {}
    for name, banner, sql in scripts:
        console.print(f"\n[bold]{banner}[/bold]")
        result = BatchExecutor(client, size_threshold=size_threshold).run(sql)
        results[name] = result
        if not result.succeeded:
            label = "Failed to create database schema" if name == "schema" else "Failed to seed database"
            raise BatchExecutionError(describe_failure(label, result), "execution")

    console.print("\n[green]✓ Database initialization completed successfully![/green]")
    return results
