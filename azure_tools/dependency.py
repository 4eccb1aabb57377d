"""Dependency injection for Azure MCP tools."""

import logging
import inspect
from typing import Dict, Any, Type, Callable

from azure_tools.interfaces import ToolInterface
from azure_tools.plugin import registry

logger = logging.getLogger(__name__)


class DependencyInjector:
    """Creates tool instances and hands them their shared dependencies.

    Dependencies are named providers (for example ``azure_clients``). A tool
    receives a provider when its constructor has a parameter of the same
    name. Providers are factories so nothing is built until a tool needs it.

    Example:
        injector.register_provider("azure_clients", get_azure_clients)
        tool = injector.get_tool_instance("query_monitor_logs")
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(DependencyInjector, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """Initialize the dependency injector."""
        # {provider_name: factory}
        self.providers: Dict[str, Callable[[], Any]] = {}

        # {tool_name: constructor parameter information}
        self.tool_constructors: Dict[str, Dict[str, Any]] = {}

        # {tool_name: instance}
        self.instances: Dict[str, ToolInterface] = {}

    def register_provider(self, name: str, factory: Callable[[], Any]) -> None:
        """Register a named dependency factory.

        Args:
            name: Constructor parameter name the dependency is passed as
            factory: Zero-argument callable returning the dependency
        """
        logger.debug(f"Registering dependency provider: {name}")
        self.providers[name] = factory

    def analyze_tool_constructor(self, tool_class: Type[ToolInterface]) -> Dict[str, Any]:
        """Analyze a tool's constructor to extract parameter information.

        Args:
            tool_class: The tool class to analyze

        Returns:
            Dictionary with constructor parameter information
        """
        sig = inspect.signature(tool_class.__init__)
        parameters = {}

        for param_name, param in sig.parameters.items():
            if param_name == "self" or param.kind in (
                inspect.Parameter.VAR_POSITIONAL,
                inspect.Parameter.VAR_KEYWORD,
            ):
                continue

            parameters[param_name] = {
                "name": param_name,
                "required": param.default is inspect.Parameter.empty,
            }

        return {"parameters": parameters}

    def get_tool_instance(self, tool_name: str) -> ToolInterface:
        """Get or create an instance of a tool with its dependencies resolved.

        Args:
            tool_name: Name of the tool to get

        Returns:
            The tool instance

        Raises:
            KeyError: If the tool is not registered
            TypeError: If a required constructor parameter has no provider
        """
        if tool_name in self.instances:
            return self.instances[tool_name]

        tool_class = registry.tools.get(tool_name)
        if tool_class is None:
            raise KeyError(f"Tool {tool_name} not registered")

        if tool_name not in self.tool_constructors:
            self.tool_constructors[tool_name] = self.analyze_tool_constructor(tool_class)

        kwargs = {}
        for param_name, param_info in self.tool_constructors[tool_name]["parameters"].items():
            if param_name in self.providers:
                kwargs[param_name] = self.providers[param_name]()
            elif param_info["required"]:
                raise TypeError(
                    f"No provider registered for required parameter '{param_name}' of tool {tool_name}"
                )

        instance = tool_class(**kwargs)
        self.instances[tool_name] = instance
        logger.debug(f"Created tool instance {tool_name} with dependencies {list(kwargs)}")
        return instance

    def resolve_all_dependencies(self) -> Dict[str, ToolInterface]:
        """Create instances for all registered tools.

        A tool that fails to construct is logged and left out.

        Returns:
            Dictionary of active tool instances
        """
        for tool_name in registry.tools:
            try:
                self.get_tool_instance(tool_name)
            except Exception as e:
                logger.error(f"Error creating instance of {tool_name}: {e}")

        return self.get_filtered_instances()

    def get_all_instances(self) -> Dict[str, ToolInterface]:
        """Get all tool instances without filtering."""
        return self.instances.copy()

    def get_filtered_instances(self) -> Dict[str, ToolInterface]:
        """Get the tool instances whose plugin is currently enabled."""
        from azure_tools.plugin_config import config

        return {
            tool_name: instance
            for tool_name, instance in self.instances.items()
            if config.is_plugin_enabled(tool_name)
        }

    def clear(self) -> None:
        """Clear all providers, constructor information and instances."""
        self.providers.clear()
        self.tool_constructors.clear()
        self.instances.clear()


# Create singleton instance
injector = DependencyInjector()
