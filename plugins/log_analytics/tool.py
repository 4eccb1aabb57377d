"""Log Analytics (Azure Monitor Logs) query tool."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

import isodate
from azure.monitor.query import LogsQueryPartialResult

from azure_tools.clients import AzureClients
from azure_tools.constants import Ecosystem
from azure_tools.interfaces import AzureToolBase
from azure_tools.plugin import register_tool
from plugins.log_analytics.formatter import (
    FormatMode,
    TabularResult,
    format_table,
    NO_RESULTS,
)

DEFAULT_TIMESPAN = "P1D"


class PartialQueryError(RuntimeError):
    """The service returned only part of the result set."""

    def __init__(self, code: Optional[str], message: Optional[str]):
        self.code = code
        self.message = message
        super().__init__(f"Query returned partial results ({code}): {message}")


def parse_timespan(timespan: Optional[str]) -> timedelta:
    """Parse an ISO 8601 duration such as "P1D" or "PT30M".

    Year and month durations have no fixed length, so they are measured back
    from the current time.

    Raises:
        ValueError: If the string is not a valid ISO 8601 duration
    """
    if not timespan:
        raise ValueError("Timespan cannot be null or empty.")
    try:
        duration = isodate.parse_duration(timespan)
    except ValueError as e:
        raise ValueError(
            f"Invalid timespan '{timespan}': expected an ISO 8601 duration such as 'P1D'"
        ) from e

    if isinstance(duration, isodate.Duration):
        duration = duration.totimedelta(end=datetime.now(timezone.utc))
    if duration <= timedelta(0):
        raise ValueError(f"Invalid timespan '{timespan}': duration must be positive")
    return duration


@register_tool(ecosystem=Ecosystem.MICROSOFT)
class LogAnalyticsQueryTool(AzureToolBase):
    """Runs KQL queries against a Log Analytics workspace.

    Example:
        tool = LogAnalyticsQueryTool()
        text = await tool.query_monitor_logs("<workspace id>", "AzureActivity | take 10")
    """

    def __init__(self, azure_clients: Optional[AzureClients] = None):
        super().__init__(azure_clients)
        self.logger = logging.getLogger(__name__)

    @property
    def name(self) -> str:
        return "query_monitor_logs"

    @property
    def description(self) -> str:
        return "Executes a KQL query in Log Analytics and returns results as text/CSV"

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "workspace_id": {
                    "type": "string",
                    "description": "The Log Analytics workspace ID. Defaults to AZURE_LOG_ANALYTICS_WORKSPACE_ID when omitted.",
                },
                "kql": {
                    "type": "string",
                    "description": "The KQL query to execute",
                },
                "timespan": {
                    "type": "string",
                    "description": "The query time range as an ISO 8601 duration (e.g. 'P1D' for one day)",
                    "default": DEFAULT_TIMESPAN,
                },
                "as_csv": {
                    "type": "boolean",
                    "description": "True for CSV output, false for pipe-delimited output",
                    "default": True,
                },
            },
            "required": ["kql"],
        }

    async def query_monitor_logs(
        self,
        workspace_id: Optional[str],
        kql: str,
        timespan: str = DEFAULT_TIMESPAN,
        as_csv: bool = True,
    ) -> str:
        """
        Execute a KQL query and format the first result table.

        Args:
            workspace_id: The workspace to query; falls back to the configured default
            kql: The KQL query
            timespan: ISO 8601 duration of the query window
            as_csv: CSV output when True, pipe-delimited otherwise

        Returns:
            The formatted table, or "No results" when the query returned no table

        Raises:
            ValueError: For a missing query or workspace, or a malformed timespan
            PartialQueryError: When the service only returned partial data
        """
        if not kql:
            raise ValueError("KQL query cannot be null or empty.")
        workspace_id = workspace_id or self.clients.get_default_workspace_id()
        if not workspace_id:
            raise ValueError(
                "Workspace ID cannot be null or empty. "
                "Pass workspace_id or set AZURE_LOG_ANALYTICS_WORKSPACE_ID."
            )
        duration = parse_timespan(timespan)

        self.logger.info(f"KQL: {kql}")
        response = await self.clients.get_logs_client().query_workspace(
            workspace_id, kql, timespan=duration
        )

        if isinstance(response, LogsQueryPartialResult):
            error = response.partial_error
            raise PartialQueryError(
                getattr(error, "code", None), getattr(error, "message", None)
            )

        if not response.tables:
            return NO_RESULTS

        table = TabularResult.from_logs_table(response.tables[0])
        self.logger.debug(
            f"Query returned {len(response.tables)} tables; formatting first with "
            f"{len(table.columns)} columns and {len(table.rows)} rows"
        )
        return format_table(table, FormatMode.from_as_csv(as_csv))

    async def execute_tool(self, arguments: Dict[str, Any]) -> str:
        """Execute the tool with the provided arguments."""
        timespan = arguments.get("timespan")
        as_csv = arguments.get("as_csv")
        if as_csv is None:
            as_csv = True
        elif not isinstance(as_csv, bool):
            raise ValueError(f"as_csv must be a boolean, got {type(as_csv).__name__}.")
        return await self.query_monitor_logs(
            workspace_id=arguments.get("workspace_id"),
            kql=arguments.get("kql"),
            timespan=DEFAULT_TIMESPAN if timespan is None else timespan,
            as_csv=as_csv,
        )
