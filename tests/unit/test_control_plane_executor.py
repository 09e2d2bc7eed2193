"""Unit tests for sequential, fail-fast statement execution."""

from __future__ import annotations

from unittest.mock import Mock

import requests

from sqlbatch.providers.control_plane.client import ControlPlaneClient
from sqlbatch.providers.control_plane.executor import ControlPlaneSQLExecutor
from tests.utils.http_fakes import make_response, sent_sql


def _fail_on(fragment: str, error: str = "syntax error", details: str | None = None):
    def _post(url, json, timeout):
        if fragment in json["sql"]:
            body = {"error": error}
            if details is not None:
                body["details"] = details
            return make_response(json_body=body)
        return make_response(json_body={})

    return _post


def test_all_statements_succeed(client: ControlPlaneClient, mock_session: Mock) -> None:
    statements = ["CREATE TABLE a (id INT);", "CREATE TABLE b (id INT);", "SELECT 1;"]

    result = ControlPlaneSQLExecutor(client).execute_statements(statements)

    assert result.status == "success"
    assert result.succeeded
    assert result.total_statements == 3
    assert result.successful_statements == 3
    assert result.failed_statement_index is None
    assert [o.statement_index for o in result.statement_results] == [1, 2, 3]
    assert all(o.total_statements == 3 for o in result.statement_results)
    assert sent_sql(mock_session) == statements


def test_fail_fast_stops_after_second_statement(
    client: ControlPlaneClient, mock_session: Mock
) -> None:
    mock_session.post.side_effect = _fail_on("BROKEN", details="near BROKEN")
    statements = ["SELECT 1;", "SELECT BROKEN;", "SELECT 3;"]

    result = ControlPlaneSQLExecutor(client).execute_statements(statements)

    assert result.status == "partial"
    assert result.failed_statement_index == 2
    assert result.total_statements == 3
    assert result.successful_statements == 1
    assert result.error_message == "syntax error"
    assert result.error_detail == "near BROKEN"
    assert result.failed_statement_preview == "SELECT BROKEN;"
    assert sent_sql(mock_session) == ["SELECT 1;", "SELECT BROKEN;"]
    assert len(result.statement_results) == 2


def test_first_statement_failure_is_failed_status(
    client: ControlPlaneClient, mock_session: Mock
) -> None:
    mock_session.post.side_effect = _fail_on("BROKEN")

    result = ControlPlaneSQLExecutor(client).execute_statements(["BROKEN;", "SELECT 2;"])

    assert result.status == "failed"
    assert result.failed_statement_index == 1
    assert result.successful_statements == 0
    assert sent_sql(mock_session) == ["BROKEN;"]


def test_transport_failure_stops_batch(client: ControlPlaneClient, mock_session: Mock) -> None:
    mock_session.post.side_effect = [
        make_response(json_body={}),
        requests.ConnectionError("refused"),
        make_response(json_body={}),
    ]

    result = ControlPlaneSQLExecutor(client).execute_statements(["A;", "B;", "C;"])

    assert result.failed_statement_index == 2
    assert "Could not connect" in result.error_message
    assert mock_session.post.call_count == 2


def test_failure_preview_is_truncated(client: ControlPlaneClient, mock_session: Mock) -> None:
    mock_session.post.side_effect = _fail_on("BROKEN")
    long_stmt = "INSERT INTO t VALUES ('BROKEN" + "x" * 400 + "');"

    result = ControlPlaneSQLExecutor(client).execute_statements([long_stmt])

    assert result.failed_statement_preview == long_stmt[:200] + "..."
    assert result.statement_results[0].sql == long_stmt


def test_empty_statement_list_succeeds(client: ControlPlaneClient, mock_session: Mock) -> None:
    result = ControlPlaneSQLExecutor(client).execute_statements([])
    assert result.succeeded
    assert result.total_statements == 0
    mock_session.post.assert_not_called()
