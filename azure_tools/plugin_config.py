"""Plugin configuration for the Azure tool registry.

Controls which plugin directories are scanned and which tools end up
registered, driven by ``MCP_*`` environment variables.
"""

import os
import logging
from typing import List, Dict, Any, Set, Optional
from pathlib import Path

logger = logging.getLogger(__name__)

ENABLE_MODES = ("all", "whitelist", "blacklist")


def _split_env_list(name: str, lower: bool = False) -> Set[str]:
    """Read a comma separated environment variable into a set."""
    raw = os.environ.get(name, "")
    items = {item.strip() for item in raw.split(",") if item.strip()}
    if lower:
        items = {item.lower() for item in items}
    return items


def _read_mode(name: str) -> str:
    mode = os.environ.get(name, "all").lower()
    if mode not in ENABLE_MODES:
        logger.warning(f"Invalid {name} value: {mode}. Using 'all'")
        return "all"
    return mode


class PluginConfig:
    """Configuration for the plugin system."""

    def __init__(self):
        """Initialize plugin configuration with default values."""
        # Set of tool class names to exclude from registration
        self.excluded_base_classes = {"ToolInterface", "AzureToolBase"}

        # Path to plugin root directories
        self.plugin_roots: List[Path] = []

        # Tool names to always exclude
        self.excluded_tool_names: Set[str] = set()

        # Plugin enable/disable configuration
        self.enabled_plugins: Set[str] = set()
        self.disabled_plugins: Set[str] = set()
        self.plugin_enable_mode = "all"  # "all", "whitelist", "blacklist"

        # Ecosystem filtering configuration
        self.enabled_ecosystems: Set[str] = set()
        self.disabled_ecosystems: Set[str] = set()
        self.ecosystem_enable_mode = "all"

        self._load_from_env()

    def _load_from_env(self):
        """Load configuration from environment variables."""
        self.excluded_base_classes.update(_split_env_list("MCP_EXCLUDED_BASE_CLASSES"))
        self.excluded_tool_names.update(_split_env_list("MCP_EXCLUDED_TOOL_NAMES"))

        env_plugin_roots = os.environ.get("MCP_PLUGIN_ROOTS", "")
        if env_plugin_roots:
            self.plugin_roots = [
                Path(p.strip()) for p in env_plugin_roots.split(",") if p.strip()
            ]
        else:
            default_plugin_root = Path(__file__).resolve().parent.parent / "plugins"
            if default_plugin_root.is_dir():
                self.plugin_roots = [default_plugin_root]
                logger.info(f"Using default plugin root: {default_plugin_root}")

        self.plugin_enable_mode = _read_mode("MCP_PLUGIN_MODE")
        self.enabled_plugins.update(_split_env_list("MCP_ENABLED_PLUGINS"))
        self.disabled_plugins.update(_split_env_list("MCP_DISABLED_PLUGINS"))

        self.ecosystem_enable_mode = _read_mode("MCP_ECOSYSTEM_MODE")
        self.enabled_ecosystems.update(_split_env_list("MCP_ENABLED_ECOSYSTEMS", lower=True))
        self.disabled_ecosystems.update(_split_env_list("MCP_DISABLED_ECOSYSTEMS", lower=True))

        logger.debug(
            f"Plugin configuration loaded from environment: "
            f"plugin_roots={self.plugin_roots}, "
            f"plugin_enable_mode={self.plugin_enable_mode}, "
            f"enabled_plugins={self.enabled_plugins}, "
            f"disabled_plugins={self.disabled_plugins}, "
            f"ecosystem_enable_mode={self.ecosystem_enable_mode}"
        )

    @staticmethod
    def _is_enabled(name: str, mode: str, enabled: Set[str], disabled: Set[str]) -> bool:
        if name in disabled:
            return False
        if mode == "whitelist":
            return name in enabled
        # "all" and "blacklist" both admit anything not explicitly disabled
        return True

    def should_register_tool_class(
        self, class_name: str, tool_name: str, ecosystem: Optional[str] = None
    ) -> bool:
        """Determine if a tool class should be registered.

        Args:
            class_name: Name of the class
            tool_name: Name of the tool
            ecosystem: Ecosystem the tool belongs to (e.g., "microsoft")

        Returns:
            True if the tool should be registered, False otherwise
        """
        if class_name in self.excluded_base_classes:
            logger.debug(f"Skipping registration of excluded base class: {class_name}")
            return False

        if tool_name in self.excluded_tool_names:
            logger.debug(f"Skipping registration of excluded tool: {tool_name}")
            return False

        if not self.is_plugin_enabled(tool_name):
            logger.debug(f"Skipping registration of disabled plugin: {tool_name}")
            return False

        if not self.is_ecosystem_enabled(ecosystem):
            logger.debug(
                f"Skipping registration of tool '{tool_name}' from disabled ecosystem: {ecosystem}"
            )
            return False

        return True

    def is_plugin_enabled(self, plugin_name: str) -> bool:
        """Check if a plugin (tool name) is enabled."""
        return self._is_enabled(
            plugin_name, self.plugin_enable_mode, self.enabled_plugins, self.disabled_plugins
        )

    def is_ecosystem_enabled(self, ecosystem: Optional[str]) -> bool:
        """Check if an ecosystem is enabled. Tools without one are always enabled."""
        if ecosystem is None:
            return True
        return self._is_enabled(
            ecosystem.lower(),
            self.ecosystem_enable_mode,
            self.enabled_ecosystems,
            self.disabled_ecosystems,
        )

    def enable_plugin(self, plugin_name: str) -> None:
        self.enabled_plugins.add(plugin_name)
        self.disabled_plugins.discard(plugin_name)
        logger.info(f"Plugin '{plugin_name}' has been enabled")

    def disable_plugin(self, plugin_name: str) -> None:
        self.disabled_plugins.add(plugin_name)
        self.enabled_plugins.discard(plugin_name)
        logger.info(f"Plugin '{plugin_name}' has been disabled")

    def get_plugin_roots(self) -> List[Path]:
        """Get the plugin root directories."""
        return self.plugin_roots

    def describe(self) -> Dict[str, Any]:
        """Summarize the active filters, for startup logging."""
        return {
            "plugin_roots": [str(p) for p in self.plugin_roots],
            "plugin_enable_mode": self.plugin_enable_mode,
            "enabled_plugins": sorted(self.enabled_plugins),
            "disabled_plugins": sorted(self.disabled_plugins),
            "ecosystem_enable_mode": self.ecosystem_enable_mode,
            "excluded_tool_names": sorted(self.excluded_tool_names),
        }


# Create a singleton instance
config = PluginConfig()
