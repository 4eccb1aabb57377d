"""Interfaces for Azure MCP tools.

This module defines the interfaces that tools must implement to be exposed
by the MCP server.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

from azure_tools.clients import AzureClients, get_azure_clients


class ToolInterface(ABC):
    """Base interface for all tools."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the tool name."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Get the tool description."""
        pass

    @property
    @abstractmethod
    def input_schema(self) -> Dict[str, Any]:
        """Get the JSON schema for the tool input."""
        pass

    @abstractmethod
    async def execute_tool(self, arguments: Dict[str, Any]) -> Any:
        """Execute the tool with the provided arguments.

        Args:
            arguments: Dictionary of arguments for the tool

        Returns:
            Tool execution result
        """
        pass


class AzureToolBase(ToolInterface):
    """Base class for tools backed by the shared Azure SDK clients.

    The clients are handed in by the dependency injector. When a tool is
    constructed without them (e.g. by the registry to read its name) the
    process-wide instance is resolved on first use.
    """

    def __init__(self, azure_clients: Optional[AzureClients] = None):
        self._azure_clients = azure_clients

    @property
    def clients(self) -> AzureClients:
        if self._azure_clients is None:
            self._azure_clients = get_azure_clients()
        return self._azure_clients

    @staticmethod
    def require_argument(arguments: Dict[str, Any], name: str, label: str) -> str:
        """Return a required string argument or raise ValueError if it is empty."""
        value = arguments.get(name)
        if value is None or value == "":
            raise ValueError(f"{label} cannot be null or empty.")
        if not isinstance(value, str):
            raise ValueError(f"{label} must be a string, got {type(value).__name__}.")
        return value
