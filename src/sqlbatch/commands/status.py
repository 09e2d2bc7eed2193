"""
Status Command Implementation

Reports what the target project currently contains: tables, row counts of
the tables an application expects, auth users and triggers.
"""

import re
from dataclasses import dataclass, field

import requests
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sqlbatch.domain.errors import ConnectionCheckError, QueryError
from sqlbatch.providers.control_plane.client import ControlPlaneClient

console = Console()

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

AUTH_USERS_SQL = "SELECT COUNT(*) FROM auth.users"

TRIGGERS_SQL = """
SELECT trigger_name, event_manipulation, action_statement
FROM information_schema.triggers
WHERE trigger_schema = '{schema}'
"""


@dataclass(slots=True)
class DatabaseStatus:
    tables: list[str] = field(default_factory=list)
    row_counts: dict[str, int] = field(default_factory=dict)
    missing_tables: list[str] = field(default_factory=list)
    count_errors: dict[str, str] = field(default_factory=dict)
    auth_user_count: int | None = None
    auth_user_error: str | None = None
    triggers: list[dict[str, object]] = field(default_factory=list)
    trigger_error: str | None = None


def _count(client: ControlPlaneClient, sql: str) -> int:
    rows = client.query(sql)
    return int(rows[0].get("count", 0)) if rows else 0


def check_database_status(
    client: ControlPlaneClient,
    expected_tables: list[str],
    schema: str = "public",
    *,
    include_auth_users: bool = True,
) -> DatabaseStatus:
    """Collect table, row-count, auth-user and trigger information

    Row counts are taken from ``<schema>.<table>``. Query failures for
    individual tables, auth users or triggers are recorded in the result
    rather than raised.

    Raises:
        ConnectionCheckError: If the table listing cannot be fetched
        QueryError: If *schema* is not a plain identifier
    """
    if not _IDENTIFIER_RE.match(schema):
        raise QueryError(f"Invalid schema name: {schema!r}", "query")

    try:
        tables = client.get_tables(schema)
    except requests.RequestException as e:
        raise ConnectionCheckError(f"Failed to get tables: {e}", "connection") from e

    status = DatabaseStatus(tables=[str(t.get("name")) for t in tables])

    for table_name in expected_tables:
        if table_name not in status.tables:
            status.missing_tables.append(table_name)
            continue
        if not _IDENTIFIER_RE.match(table_name):
            status.count_errors[table_name] = "invalid table name"
            continue
        try:
            status.row_counts[table_name] = _count(
                client, f"SELECT COUNT(*) FROM {schema}.{table_name}"
            )
        except QueryError as e:
            status.count_errors[table_name] = str(e)

    if include_auth_users:
        try:
            status.auth_user_count = _count(client, AUTH_USERS_SQL)
        except QueryError as e:
            status.auth_user_error = str(e)

    try:
        status.triggers = client.query(TRIGGERS_SQL.format(schema=schema))
    except QueryError as e:
        status.trigger_error = str(e)

    return status


def print_database_status(status: DatabaseStatus) -> None:
    console.print(f"\n[bold]Found {len(status.tables)} tables[/bold]")
    for name in status.tables:
        console.print(f"  - {name}", markup=False)

    if status.row_counts or status.missing_tables or status.count_errors:
        table = Table(title="Row counts")
        table.add_column("Table")
        table.add_column("Rows", justify="right")
        for name, count in status.row_counts.items():
            table.add_row(escape(name), str(count))
        for name, error in status.count_errors.items():
            table.add_row(escape(name), f"[red]error: {escape(error)}[/red]")
        for name in status.missing_tables:
            table.add_row(escape(name), "[red]does not exist[/red]")
        console.print(table)

    if status.auth_user_error:
        console.print(f"[red]✗[/red] Error checking auth users: {escape(status.auth_user_error)}")
    elif status.auth_user_count is not None:
        console.print(f"Found {status.auth_user_count} users in auth.users")

    if status.trigger_error:
        console.print(f"[red]✗[/red] Error checking triggers: {escape(status.trigger_error)}")
    elif not status.triggers:
        console.print("No triggers found")
    else:
        console.print(f"Found {len(status.triggers)} triggers:")
        for trigger in status.triggers:
            console.print(
                f"  - {trigger.get('trigger_name')} ({trigger.get('event_manipulation')})",
                markup=False,
            )
