import importlib
import inspect
import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List, Type, Set, Optional, Any, Union

from azure_tools.interfaces import ToolInterface
from azure_tools.constants import Ecosystem
from azure_tools.plugin_config import config

logger = logging.getLogger(__name__)


@contextmanager
def time_plugin_operation(name: str):
    start_time = time.time()
    logger.info(f"🚀 Starting {name}...")
    try:
        yield
    finally:
        duration = time.time() - start_time
        logger.info(f"✅ {name} completed in {duration:.2f}s")


class PluginRegistry:
    """Registry mapping tool names to tool classes.

    Tools register themselves through the ``register_tool`` decorator when
    their module is imported; ``discover_plugin_directory`` imports every
    ``*tool.py`` module found in the plugin packages.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(PluginRegistry, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """Initialize the plugin registry"""
        self.tools: Dict[str, Type[ToolInterface]] = {}
        self.discovered_paths: Set[str] = set()
        self.tool_ecosystems: Dict[str, Optional[str]] = {}
        self.tool_plugins: Dict[str, str] = {}  # tool name -> plugin package

    def register_tool(
        self,
        tool_class: Type[ToolInterface],
        ecosystem: Optional[Union[str, Ecosystem]] = None,
    ) -> Optional[Type[ToolInterface]]:
        """Register a tool class.

        Args:
            tool_class: A class that implements ToolInterface
            ecosystem: Ecosystem the tool belongs to (e.g., "microsoft")

        Returns:
            The registered tool class or None if it wasn't registered

        Raises:
            TypeError: If the provided class doesn't implement ToolInterface
        """
        if not inspect.isclass(tool_class):
            raise TypeError(f"Expected a class, got {type(tool_class)}")

        if not issubclass(tool_class, ToolInterface):
            raise TypeError(
                f"Class {tool_class.__name__} does not implement ToolInterface"
            )

        if inspect.isabstract(tool_class):
            logger.debug(
                f"Skipping registration of abstract class {tool_class.__name__}"
            )
            return None

        # Tools construct without arguments; clients are resolved lazily
        try:
            temp_instance = tool_class()
            tool_name = temp_instance.name
            description = temp_instance.description
            input_schema = temp_instance.input_schema
        except Exception as e:
            logger.error(f"Error creating instance of {tool_class.__name__}: {e}")
            return None

        if not tool_name or not isinstance(tool_name, str):
            logger.warning(f"Tool {tool_class.__name__} has invalid name: {tool_name}")
            return None
        if not description or not isinstance(description, str):
            logger.warning(
                f"Tool {tool_class.__name__} has invalid description: {description}"
            )
            return None
        if not isinstance(input_schema, dict):
            logger.warning(
                f"Tool {tool_class.__name__} has invalid input_schema: {type(input_schema)}"
            )
            return None

        ecosystem_name = str(ecosystem) if ecosystem is not None else None
        if not config.should_register_tool_class(
            tool_class.__name__, tool_name, ecosystem=ecosystem_name
        ):
            return None

        logger.info(
            f"Registering tool: {tool_name} ({tool_class.__name__})"
            f"{f' [ecosystem: {ecosystem_name}]' if ecosystem_name else ''}"
        )
        self.tools[tool_name] = tool_class
        self.tool_ecosystems[tool_name] = ecosystem_name
        self.tool_plugins[tool_name] = tool_class.__module__.rsplit(".", 1)[0]
        return tool_class

    def find_tool_name(self, tool_name: str) -> Optional[str]:
        """Resolve a tool name, falling back to a case-insensitive match."""
        if tool_name in self.tools:
            return tool_name
        for registered_name in self.tools:
            if registered_name.lower() == tool_name.lower():
                logger.debug(
                    f"Resolved tool '{tool_name}' by case-insensitive match: '{registered_name}'"
                )
                return registered_name
        return None

    def get_tool_instance(self, tool_name: str) -> Optional[ToolInterface]:
        """Get or create an instance of a registered tool.

        Args:
            tool_name: Name of the tool to get

        Returns:
            Instance of the tool, or None if not found
        """
        registered_name = self.find_tool_name(tool_name)
        if registered_name is None:
            logger.warning(f"Tool '{tool_name}' not found")
            return None

        from azure_tools.dependency import injector

        return injector.get_tool_instance(registered_name)

    def _scan_module_for_tools(self, module) -> int:
        """Register every concrete ToolInterface subclass defined in a module.

        Returns:
            Number of tools registered from the module
        """
        module_name = getattr(module, "__name__", "Unknown")
        registered = 0

        for name, obj in inspect.getmembers(module, inspect.isclass):
            if obj.__module__ != module_name or not issubclass(obj, ToolInterface):
                continue
            if inspect.isabstract(obj) or obj in self.tools.values():
                continue

            ecosystem = getattr(obj, "_mcp_ecosystem", None)
            if self.register_tool(obj, ecosystem=ecosystem) is not None:
                registered += 1

        if registered:
            logger.info(f"Module {module_name}: registered {registered} tools")
        else:
            logger.debug(f"No new tool classes found in module {module_name}")
        return registered

    def discover_plugin_directory(self, plugin_dir: Path) -> None:
        """Import the ``*tool.py`` modules of every plugin package under a directory.

        The directory itself is imported as a package, so its parent is put on
        ``sys.path`` when needed.

        Args:
            plugin_dir: Path to the plugin directory
        """
        if not plugin_dir.exists() or not plugin_dir.is_dir():
            logger.warning(
                f"Plugin directory does not exist or is not a directory: {plugin_dir}"
            )
            return

        logger.info(f"🔍 Scanning plugin directory: {plugin_dir}")

        plugin_subdirs = sorted(
            item
            for item in plugin_dir.iterdir()
            if item.is_dir() and (item / "__init__.py").exists()
        )
        if not plugin_subdirs:
            logger.info(f"📁 No plugin directories found in: {plugin_dir}")
            return

        parent_dir = str(plugin_dir.resolve().parent)
        if parent_dir not in sys.path:
            sys.path.insert(0, parent_dir)
            logger.debug(f"Added to sys.path: {parent_dir}")

        for item in plugin_subdirs:
            package_name = f"{plugin_dir.name}.{item.name}"
            if package_name in self.discovered_paths:
                logger.debug(f"Skipping already processed plugin: {package_name}")
                continue
            self.discovered_paths.add(package_name)

            start_time = time.time()
            tool_files = sorted(item.glob("*tool.py"))
            if not tool_files:
                logger.info(f"🔌 {item.name}: no tool modules found (*tool.py)")
                continue

            logger.info(
                f"🔌 Loading plugin: {item.name} ({', '.join(f.name for f in tool_files)})"
            )
            for tool_file in tool_files:
                module_name = f"{package_name}.{tool_file.stem}"
                try:
                    module = importlib.import_module(module_name)
                except Exception as e:
                    logger.error(f"  ❌ Error importing tool module {module_name}: {e}")
                    continue
                self._scan_module_for_tools(module)

            logger.info(f"  ⏱️  Plugin {item.name} loaded in {time.time() - start_time:.3f}s")

    def get_plugin_loading_summary(self) -> Dict[str, Any]:
        """Summarize the registered tools grouped by plugin package."""
        plugin_groups: Dict[str, List[str]] = {}
        for tool_name, plugin in self.tool_plugins.items():
            plugin_groups.setdefault(plugin, []).append(tool_name)

        return {
            "total_tools_registered": len(self.tools),
            "plugin_groups": plugin_groups,
            "discovered_plugin_paths": sorted(self.discovered_paths),
            "tool_ecosystems": dict(self.tool_ecosystems),
        }

    def clear(self) -> None:
        """Clear all registered tools."""
        self.tools.clear()
        self.discovered_paths.clear()
        self.tool_ecosystems.clear()
        self.tool_plugins.clear()


# Create singleton instance
registry = PluginRegistry()


def register_tool(
    cls=None,
    *,
    ecosystem: Optional[Union[str, Ecosystem]] = None,
):
    """Decorator to register a tool class with the plugin registry.

    Example:
        @register_tool
        class MyTool(ToolInterface):
            ...

        @register_tool(ecosystem="microsoft")
        class AzureTool(AzureToolBase):
            ...
    """

    def _register(cls):
        # Store metadata on the class for discovery
        cls._mcp_ecosystem = str(ecosystem) if ecosystem is not None else None
        registry.register_tool(cls, ecosystem=ecosystem)
        return cls

    if cls is None:
        return _register
    return _register(cls)


def discover_and_register_tools() -> None:
    """Discover and register the tools of every configured plugin root."""
    plugin_roots = config.get_plugin_roots()
    logger.info(f"🔍 Discovering tools in {len(plugin_roots)} plugin root directories")

    with time_plugin_operation("Plugin Directories Discovery"):
        for plugin_dir in plugin_roots:
            try:
                registry.discover_plugin_directory(Path(plugin_dir))
            except Exception as e:
                logger.error(
                    f"❌ Error discovering tools in plugin directory {plugin_dir}: {e}"
                )

    summary = registry.get_plugin_loading_summary()
    logger.info("=" * 60)
    logger.info("📊 PLUGIN LOADING SUMMARY")
    logger.info("=" * 60)
    logger.info(f"🔧 Total tools registered: {summary['total_tools_registered']}")
    for plugin, tools in summary["plugin_groups"].items():
        logger.info(f"  • {plugin}: {', '.join(tools)}")
    logger.info("=" * 60)
