"""
Control-plane HTTP client

Thin wrapper around the control-plane endpoints that execute SQL against the
target database on our behalf:

- ``POST /execute_postgresql`` with ``{"sql", "projectRef"}``
- ``POST /get_tables`` with ``{"projectRef", "schema"}``
- ``GET /health``

One ``requests.Session`` is reused for every call made through a client.
"""

import json
import time
from collections.abc import Callable, Iterable
from typing import Any

import requests
from rich.console import Console

from sqlbatch.domain.errors import QueryError
from sqlbatch.providers.base.executor import StatementOutcome

console = Console()

ResponseHook = Callable[..., Any]

_RESPONSE_TEXT_LIMIT = 500


class ControlPlaneClient:
    """Client for a single project on a control-plane server

    Attributes:
        base_url: Server root, e.g. ``http://localhost:3011``
        project_ref: Project reference sent with every request
        session: Transport shared by all calls
        timeout: Per-request timeout in seconds (None = no timeout)
    """

    def __init__(
        self,
        base_url: str,
        project_ref: str,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
        response_hooks: Iterable[ResponseHook] | None = None,
    ) -> None:
        """Initialize client

        Args:
            base_url: Server root URL
            project_ref: Project reference
            session: Optional pre-configured session (tests, proxies)
            timeout: Per-request timeout in seconds
            response_hooks: Callables registered as requests ``response``
                hooks on this client's session only
        """
        self.base_url = base_url.rstrip("/")
        self.project_ref = project_ref
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        for hook in response_hooks or ():
            self.session.hooks.setdefault("response", []).append(hook)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _post(self, path: str, payload: dict[str, Any]) -> requests.Response:
        response = self.session.post(self._url(path), json=payload, timeout=self.timeout)
        response.raise_for_status()
        return response

    def execute_sql(self, sql: str) -> StatementOutcome:
        """Send one statement (or a whole script) for execution

        Never raises for transport or logical failures; both come back as an
        outcome with ``succeeded=False``. No retry is attempted.
        """
        start = time.time()
        try:
            response = self._post("execute_postgresql", {"sql": sql, "projectRef": self.project_ref})
            body = _json_or_none(response)
        except requests.RequestException as e:
            message, detail = self._describe_transport_error(e)
            return _outcome(sql, start, False, message, detail)

        if isinstance(body, dict) and body.get("error"):
            details = body.get("details")
            return _outcome(
                sql,
                start,
                False,
                str(body["error"]),
                None if details is None else str(details),
            )
        return _outcome(sql, start, True)

    def query(self, sql: str) -> list[dict[str, Any]]:
        """Run a read-only query and return its result rows

        Raises:
            QueryError: On transport failure or an ``error`` field in the body
        """
        try:
            response = self._post("execute_postgresql", {"sql": sql, "projectRef": self.project_ref})
        except requests.RequestException as e:
            message, _ = self._describe_transport_error(e)
            raise QueryError(message, "query") from e

        body = _json_or_none(response)
        if isinstance(body, dict) and body.get("error"):
            raise QueryError(str(body["error"]), "query")
        if isinstance(body, dict):
            rows = body.get("result") or []
        elif isinstance(body, list):
            rows = body
        else:
            rows = []
        return [row for row in rows if isinstance(row, dict)]

    def get_tables(self, schema: str = "public") -> list[dict[str, Any]]:
        """List tables of *schema*

        Raises:
            requests.RequestException: If the endpoint cannot be reached
        """
        response = self._post("get_tables", {"projectRef": self.project_ref, "schema": schema})
        body = _json_or_none(response)
        if not isinstance(body, list):
            return []
        return [table for table in body if isinstance(table, dict)]

    def health(self) -> bool:
        """Liveness probe; any non-error response counts as healthy"""
        try:
            response = self.session.get(self._url("health"), timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException:
            return False
        return True

    def _describe_transport_error(self, error: requests.RequestException) -> tuple[str, str | None]:
        """Turn a transport exception into (message, detail)."""
        if isinstance(error, requests.ConnectionError):
            return (
                f"Could not connect to control-plane at {self.base_url}. Make sure it's running.",
                str(error),
            )

        response = error.response
        if response is None:
            return str(error), None

        body = _json_or_none(response)
        if body is not None:
            detail = json.dumps(body, indent=2)
        else:
            text = response.text or ""
            detail = text[:_RESPONSE_TEXT_LIMIT] + ("..." if len(text) > _RESPONSE_TEXT_LIMIT else "")
        return f"HTTP {response.status_code}: {error}", detail or None

    def close(self) -> None:
        self.session.close()


def trace_exchange(response: requests.Response, *args: Any, **kwargs: Any) -> None:
    """Response hook that prints each request/response pair."""
    request = response.request
    console.print(f"[dim]→ {request.method} {request.url}[/dim]")
    if request.body:
        body = request.body.decode("utf-8", "replace") if isinstance(request.body, bytes) else request.body
        console.print(f"  {body[:_RESPONSE_TEXT_LIMIT]}", style="dim", markup=False)
    console.print(f"[dim]← {response.status_code} ({response.elapsed.total_seconds():.2f}s)[/dim]")
    console.print(f"  {response.text[:_RESPONSE_TEXT_LIMIT]}", style="dim", markup=False)


def _json_or_none(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _outcome(
    sql: str,
    start: float,
    succeeded: bool,
    error_message: str | None = None,
    error_detail: str | None = None,
) -> StatementOutcome:
    return StatementOutcome(
        sql=sql,
        succeeded=succeeded,
        error_message=error_message,
        error_detail=error_detail,
        execution_time_ms=int((time.time() - start) * 1000),
    )
