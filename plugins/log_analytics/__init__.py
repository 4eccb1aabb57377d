"""Azure Monitor Log Analytics plugin.

Provides the query_monitor_logs tool, which runs KQL queries against a Log
Analytics workspace and returns the first result table as CSV or
pipe-delimited text.
"""

from .formatter import FormatMode, TabularResult, format_table
from .tool import LogAnalyticsQueryTool, PartialQueryError

__all__ = [
    "FormatMode",
    "TabularResult",
    "format_table",
    "LogAnalyticsQueryTool",
    "PartialQueryError",
]
