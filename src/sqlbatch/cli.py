"""
Click-based CLI for sqlbatch.
"""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from . import __version__
from .commands import (
    BatchExecutor,
    apply_script,
    check_database_status,
    initialize_database,
    print_database_status,
)
from .core import load_sql_file, preview_statement, split_sql_statements
from .domain import SqlBatchError
from .providers.control_plane import ControlPlaneClient, trace_exchange
from .settings import Settings, get_settings

console = Console()


def _connection_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    opts = [
        click.option("--base-url", "-u", help="Control-plane URL (env: SQLBATCH_BASE_URL)"),
        click.option(
            "--project-ref", "-p", help="Project reference (env: SQLBATCH_PROJECT_REF)"
        ),
        click.option("--timeout", type=float, help="Per-request timeout in seconds"),
        click.option("--trace-http", is_flag=True, help="Print every request/response pair"),
    ]
    for opt in reversed(opts):
        fn = opt(fn)
    return fn


def _build_client(
    settings: Settings,
    base_url: str | None,
    project_ref: str | None,
    timeout: float | None,
    trace_http: bool,
) -> ControlPlaneClient:
    ref = project_ref or settings.project_ref
    if not ref:
        console.print(
            "[red]✗ Error:[/red] No project reference given "
            "(use --project-ref or set SQLBATCH_PROJECT_REF)"
        )
        sys.exit(1)
    return ControlPlaneClient(
        base_url or settings.base_url,
        ref,
        timeout=timeout if timeout is not None else settings.timeout_seconds,
        response_hooks=[trace_exchange] if trace_http else None,
    )


@click.group()
@click.version_option(version=__version__, prog_name="sqlbatch")
def cli() -> None:
    """sqlbatch CLI for pushing SQL scripts to a control-plane endpoint"""
    pass


@cli.command()
@_connection_options
@click.option("--threshold", type=int, help="Split scripts longer than this (characters)")
@click.option("--skip-check", is_flag=True, help="Skip the connection test")
@click.argument("script", type=click.Path(path_type=Path))
def apply(
    base_url: str | None,
    project_ref: str | None,
    timeout: float | None,
    trace_http: bool,
    threshold: int | None,
    skip_check: bool,
    script: Path,
) -> None:
    """Execute a SQL script against the target project

    Scripts above the size threshold are split into statements and executed
    one by one; execution stops at the first failing statement.

    Examples:

        sqlbatch apply --project-ref abc123 database/schema.sql

        SQLBATCH_PROJECT_REF=abc123 sqlbatch apply --threshold 20000 seed.sql
    """
    settings = get_settings()
    client = _build_client(settings, base_url, project_ref, timeout, trace_http)
    try:
        apply_script(
            client,
            script,
            size_threshold=threshold if threshold is not None else settings.size_threshold,
            check_connection=not skip_check,
        )
    except SqlBatchError as e:
        console.print(f"[red]✗ Apply failed:[/red] {escape(str(e))}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]✗ Unexpected error:[/red] {escape(str(e))}")
        sys.exit(1)
    finally:
        client.close()


@cli.command("init-db")
@_connection_options
@click.option("--schema", "schema_file", type=click.Path(path_type=Path), help="Schema script")
@click.option("--seed", "seed_file", type=click.Path(path_type=Path), help="Seed data script")
@click.option("--threshold", type=int, help="Split scripts longer than this (characters)")
def init_db(
    base_url: str | None,
    project_ref: str | None,
    timeout: float | None,
    trace_http: bool,
    schema_file: Path | None,
    seed_file: Path | None,
    threshold: int | None,
) -> None:
    """Create the database schema and load seed data"""
    settings = get_settings()
    client = _build_client(settings, base_url, project_ref, timeout, trace_http)
    try:
        initialize_database(
            client,
            schema_file or settings.schema_file,
            seed_file or settings.seed_file,
            size_threshold=threshold if threshold is not None else settings.size_threshold,
        )
    except SqlBatchError as e:
        console.print(f"[red]✗ Database initialization failed:[/red] {escape(str(e))}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]✗ Unexpected error:[/red] {escape(str(e))}")
        sys.exit(1)
    finally:
        client.close()


@cli.command()
@_connection_options
def check(
    base_url: str | None,
    project_ref: str | None,
    timeout: float | None,
    trace_http: bool,
) -> None:
    """Test the connection to the control-plane"""
    client = _build_client(get_settings(), base_url, project_ref, timeout, trace_http)
    try:
        BatchExecutor(client).check_connection()
    except SqlBatchError as e:
        console.print(f"[red]✗ Connection test failed:[/red] {escape(str(e))}")
        sys.exit(1)
    finally:
        client.close()


@cli.command()
@_connection_options
@click.option("--table", "-t", "tables", multiple=True, help="Table to count rows in")
@click.option("--schema", default="public", show_default=True, help="Schema to inspect")
@click.option("--skip-auth-users", is_flag=True, help="Do not count rows in auth.users")
def status(
    base_url: str | None,
    project_ref: str | None,
    timeout: float | None,
    trace_http: bool,
    tables: tuple[str, ...],
    schema: str,
    skip_auth_users: bool,
) -> None:
    """Show tables, row counts, auth users and triggers of the target project

    Without --table, the tables listed in SQLBATCH_EXPECTED_TABLES are counted.
    """
    settings = get_settings()
    client = _build_client(settings, base_url, project_ref, timeout, trace_http)
    try:
        result = check_database_status(
            client,
            list(tables) or list(settings.expected_tables),
            schema,
            include_auth_users=not skip_auth_users,
        )
    except SqlBatchError as e:
        console.print(f"[red]✗ Status check failed:[/red] {escape(str(e))}")
        sys.exit(1)
    finally:
        client.close()
    print_database_status(result)
    console.print("\n[green]✓ Database status check completed[/green]")


@cli.command()
@click.option("--full", is_flag=True, help="Print whole statements instead of previews")
@click.argument("script", type=click.Path(path_type=Path))
def split(full: bool, script: Path) -> None:
    """Show the statements a script splits into, without executing anything"""
    try:
        statements = split_sql_statements(load_sql_file(script))
    except SqlBatchError as e:
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        sys.exit(1)

    total = len(statements)
    for i, stmt in enumerate(statements, 1):
        console.print(f"[cyan]-- Statement {i}/{total}[/cyan]")
        console.print(Syntax(stmt if full else preview_statement(stmt), "sql"))
    console.print(f"\n{total} statement(s)")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
