"""
Tests for the LogAnalyticsQueryTool class in plugins/log_analytics/tool.py.
"""

import pytest
from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import MagicMock, AsyncMock, patch

from azure.monitor.query import LogsQueryPartialResult

from ..tool import (
    LogAnalyticsQueryTool,
    PartialQueryError,
    parse_timespan,
    DEFAULT_TIMESPAN,
)


def make_table(columns, rows):
    return SimpleNamespace(columns=columns, rows=rows)


@pytest.fixture
def mock_clients():
    clients = MagicMock()
    clients.get_default_workspace_id.return_value = None
    logs_client = MagicMock()
    logs_client.query_workspace = AsyncMock(
        return_value=SimpleNamespace(tables=[make_table(["a", "b"], [["1", "2"]])])
    )
    clients.get_logs_client.return_value = logs_client
    return clients


@pytest.fixture
def tool(mock_clients):
    return LogAnalyticsQueryTool(azure_clients=mock_clients)


class TestParseTimespan:
    def test_days(self):
        assert parse_timespan("P1D") == timedelta(days=1)

    def test_minutes(self):
        assert parse_timespan("PT30M") == timedelta(minutes=30)

    def test_month_is_measured_from_now(self):
        duration = parse_timespan("P1M")
        assert timedelta(days=28) <= duration <= timedelta(days=31)

    @pytest.mark.parametrize("value", ["1 day", "garbage", "P1X"])
    def test_invalid(self, value):
        with pytest.raises(ValueError, match="Invalid timespan"):
            parse_timespan(value)

    def test_empty(self):
        with pytest.raises(ValueError, match="Timespan cannot be null or empty"):
            parse_timespan("")

    def test_zero_duration_rejected(self):
        with pytest.raises(ValueError, match="must be positive"):
            parse_timespan("PT0S")


def test_tool_properties(tool):
    assert tool.name == "query_monitor_logs"
    assert "KQL" in tool.description
    assert tool.input_schema["required"] == ["kql"]


@pytest.mark.asyncio
async def test_query_formats_first_table_as_csv(tool, mock_clients):
    result = await tool.query_monitor_logs("ws-1", "Heartbeat | take 1")

    assert result == "a,b\n1,2\n"
    mock_clients.get_logs_client.return_value.query_workspace.assert_awaited_once_with(
        "ws-1", "Heartbeat | take 1", timespan=timedelta(days=1)
    )


@pytest.mark.asyncio
async def test_query_pipe_delimited(tool, mock_clients):
    logs_client = mock_clients.get_logs_client.return_value
    logs_client.query_workspace.return_value = SimpleNamespace(
        tables=[make_table(["a", "b"], [["x,y", None]]), make_table(["c"], [["ignored"]])]
    )

    result = await tool.query_monitor_logs("ws-1", "T", timespan="PT1H", as_csv=False)

    assert result == "a | b\nx,y | \n"
    assert logs_client.query_workspace.await_args.kwargs["timespan"] == timedelta(hours=1)


@pytest.mark.asyncio
async def test_query_without_tables_returns_no_results(tool, mock_clients):
    mock_clients.get_logs_client.return_value.query_workspace.return_value = SimpleNamespace(
        tables=[]
    )
    assert await tool.query_monitor_logs("ws-1", "T") == "No results"


@pytest.mark.asyncio
async def test_partial_result_raises(tool, mock_clients):
    partial = MagicMock(spec=LogsQueryPartialResult)
    partial.partial_error = SimpleNamespace(code="PartialError", message="query timed out")
    mock_clients.get_logs_client.return_value.query_workspace.return_value = partial

    with pytest.raises(PartialQueryError) as exc_info:
        await tool.query_monitor_logs("ws-1", "T")

    assert exc_info.value.code == "PartialError"
    assert "query timed out" in str(exc_info.value)


@pytest.mark.asyncio
async def test_invalid_timespan_fails_before_query(tool, mock_clients):
    with pytest.raises(ValueError, match="Invalid timespan"):
        await tool.query_monitor_logs("ws-1", "T", timespan="one day")

    mock_clients.get_logs_client.assert_not_called()


@pytest.mark.asyncio
async def test_empty_kql_rejected(tool, mock_clients):
    with pytest.raises(ValueError, match="KQL query cannot be null or empty"):
        await tool.query_monitor_logs("ws-1", "")

    mock_clients.get_logs_client.assert_not_called()


@pytest.mark.asyncio
async def test_workspace_falls_back_to_default(tool, mock_clients):
    mock_clients.get_default_workspace_id.return_value = "default-ws"

    await tool.query_monitor_logs(None, "T")

    args = mock_clients.get_logs_client.return_value.query_workspace.await_args.args
    assert args[0] == "default-ws"


@pytest.mark.asyncio
async def test_missing_workspace_rejected(tool, mock_clients):
    with pytest.raises(ValueError, match="Workspace ID cannot be null or empty"):
        await tool.query_monitor_logs(None, "T")


@pytest.mark.asyncio
async def test_execute_tool_applies_defaults(tool):
    with patch.object(tool, "query_monitor_logs", AsyncMock(return_value="ok")) as query:
        result = await tool.execute_tool({"workspace_id": "ws", "kql": "T", "timespan": None})

    assert result == "ok"
    query.assert_awaited_once_with(
        workspace_id="ws", kql="T", timespan=DEFAULT_TIMESPAN, as_csv=True
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("as_csv", ["false", "true", 0, 1])
async def test_execute_tool_rejects_non_boolean_as_csv(tool, mock_clients, as_csv):
    with pytest.raises(ValueError, match="as_csv must be a boolean"):
        await tool.execute_tool({"workspace_id": "ws", "kql": "T", "as_csv": as_csv})

    mock_clients.get_logs_client.assert_not_called()


@pytest.mark.asyncio
async def test_execute_tool_as_csv_false_uses_pipes(tool):
    result = await tool.execute_tool({"workspace_id": "ws", "kql": "T", "as_csv": False})
    assert result == "a | b\n1 | 2\n"
