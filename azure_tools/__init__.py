"""Azure MCP Tools - MCP tools proxying Azure Monitor and Azure Storage."""

from azure_tools.interfaces import ToolInterface, AzureToolBase
from azure_tools.clients import AzureClients, get_azure_clients
from azure_tools.constants import Ecosystem

from config import env

# Import plugin system
from azure_tools.plugin import (
    register_tool,
    registry,
    discover_and_register_tools,
    PluginRegistry,
)

# Import dependency injection system
from azure_tools.dependency import injector, DependencyInjector

__version__ = "0.1.0"

__all__ = [
    # Interfaces
    "ToolInterface",
    "AzureToolBase",
    # Clients
    "AzureClients",
    "get_azure_clients",
    "Ecosystem",
    "env",
    # Plugin system
    "register_tool",
    "registry",
    "discover_and_register_tools",
    "PluginRegistry",
    # Dependency injection
    "injector",
    "DependencyInjector",
]
