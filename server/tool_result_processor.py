"""Tool result processing utilities.

Converts the values returned by tools into MCP content items.
"""

from typing import Any, List
from mcp.types import TextContent


def process_tool_result(result: Any) -> List[TextContent]:
    """Process a tool execution result into MCP text content.

    Args:
        result: The result from a tool execution. Can be:
            - A string (the usual case; wrapped in a single TextContent)
            - A TextContent or a list of TextContent (returned as a list)
            - Any other value (converted with str())

    Returns:
        List of TextContent objects
    """
    if isinstance(result, TextContent):
        return [result]
    if isinstance(result, list) and result and all(
        isinstance(item, TextContent) for item in result
    ):
        return result
    if isinstance(result, str):
        return [TextContent(type="text", text=result)]
    return [TextContent(type="text", text=str(result))]
