"""
Azure MCP Tools configuration package.

This package contains the centralized environment configuration for the server
and its tools.
"""

from config.manager import EnvironmentManager, env_manager
from config.types import AzureParameters

# Re-export the singleton instance for easy access
env = env_manager

__all__ = [
    "EnvironmentManager",
    "env_manager",
    "env",
    "AzureParameters",
]
