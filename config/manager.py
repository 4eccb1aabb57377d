from pathlib import Path
from typing import Dict, Any, Optional, List, Callable
from config.types import AzureParameters
import logging
import os


class EnvironmentManager:
    """
    Environment manager holding the server settings and the Azure connection
    parameters loaded from .env files, the OS environment and providers.
    """

    _instance = None

    # List of all settings that are paths
    PATH_SETTINGS = [
        "tool_history_path",
    ]

    # Default settings with their types
    DEFAULT_SETTINGS = {
        # Tool history settings
        "tool_history_enabled": (False, bool),
        "tool_history_path": (".history", str),
        # Server settings
        "server_port": (8000, int),
        "server_transport": ("sse", str),
    }

    # Prefix for Azure connection parameters, e.g. AZURE_TENANT_ID -> tenant_id
    AZURE_PREFIX = "AZURE_"

    # Create mapping dynamically - each setting can be set via its uppercase env var
    ENV_MAPPING = {setting.upper(): setting for setting in DEFAULT_SETTINGS.keys()}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """Initialize environment with default values"""
        self._providers: List[Callable[[], Dict[str, Any]]] = []
        self.azure_parameters: Dict[str, Any] = {}
        self.settings: Dict[str, Any] = {}
        self.logger = logging.getLogger(__name__)

        # Initialize settings with default values
        for key, (default_value, _) in self.DEFAULT_SETTINGS.items():
            self.settings[key] = default_value

        self._load_from_env_file()
        self._resolve_path_settings()

    def _resolve_path_settings(self):
        """Resolve relative path settings against the server package directory"""
        server_root = (Path(__file__).parent.parent / "server").resolve()
        for key in self.PATH_SETTINGS:
            value = self.settings.get(key)
            if value is not None:
                p = Path(value)
                if not p.is_absolute():
                    p = server_root / p
                self.settings[key] = str(p.resolve())

    def _get_git_root(self) -> Optional[Path]:
        """Try to determine the git root directory

        Returns:
            Path to the git root directory or None if not found
        """
        dir_to_check = Path.cwd()
        for _ in range(10):  # Limit the search depth
            git_dir = dir_to_check / ".git"
            if git_dir.exists() and git_dir.is_dir():
                return dir_to_check

            parent_dir = dir_to_check.parent
            if parent_dir == dir_to_check:  # Reached the root
                break
            dir_to_check = parent_dir

        return None

    def _convert_value(self, value: str, target_type: type) -> Any:
        """Convert string value to target type"""
        if target_type == bool:
            return value.lower() in ("true", "1", "yes", "on")
        return target_type(value)

    def _candidate_env_files(self) -> List[Path]:
        """Return the .env locations to probe, in order of preference"""
        env_file_paths = [Path.cwd() / ".env"]

        git_root = self._get_git_root()
        if git_root:
            env_file_paths.append(git_root / ".env")

        try:
            env_file_paths.append(Path.home() / ".env")
        except (RuntimeError, OSError):
            # Skip home directory if it can't be determined
            pass

        return env_file_paths

    def _load_from_env_file(self):
        """Find and load variables from the first .env file found"""
        env_file_paths = self._candidate_env_files()

        for env_path in env_file_paths:
            if env_path.exists() and env_path.is_file():
                self.logger.info(f"Loading environment from: {env_path}")
                self._parse_env_file(env_path)
                return

        self.logger.debug(
            "No .env file found. Tried: "
            + ", ".join(str(env_path) for env_path in env_file_paths)
        )

    def _parse_env_file(self, env_file_path: Path):
        """Parse a .env file and load variables into environment"""
        try:
            with open(env_file_path, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        key, value = line.split("=", 1)
                        key = key.strip()
                        value = value.strip()

                        # Remove quotes if present
                        if (value.startswith('"') and value.endswith('"')) or (
                            value.startswith("'") and value.endswith("'")
                        ):
                            value = value[1:-1]

                        self._apply_variable(key, value)

        except OSError as e:
            self.logger.error(f"Error parsing .env file {env_file_path}: {e}")

    def _apply_variable(self, key: str, value: str):
        """Route a single variable to the settings or the Azure parameters"""
        if key in self.ENV_MAPPING:
            setting_name = self.ENV_MAPPING[key]
            _, target_type = self.DEFAULT_SETTINGS[setting_name]
            try:
                self.settings[setting_name] = self._convert_value(value, target_type)
            except ValueError:
                self.logger.warning(
                    f"Ignoring invalid value for {key}: {value!r} (expected {target_type.__name__})"
                )
        # Handle AZURE_ prefixed variables
        elif key.startswith(self.AZURE_PREFIX):
            param_name = key[len(self.AZURE_PREFIX):].lower()
            self.azure_parameters[param_name] = value

    def register_provider(self, provider: Callable[[], Dict[str, Any]]):
        """Register a provider function that returns additional environment data"""
        self._providers.append(provider)
        return self

    def load(self):
        """Load all environment information"""
        self._load_from_env_file()

        # OS environment wins over .env files
        for key, value in os.environ.items():
            self._apply_variable(key, value)

        # Call all registered providers
        for provider in self._providers:
            try:
                additional_data = provider()
            except Exception as e:
                self.logger.error(f"Error from environment provider: {e}")
                continue

            if azure_params := additional_data.get("azure_parameters", {}):
                for key, value in azure_params.items():
                    self.azure_parameters[key] = value

            if settings := additional_data.get("settings", {}):
                for key, value in settings.items():
                    if key in self.settings:
                        self.settings[key] = value

        self._resolve_path_settings()

        return self

    def get_setting(self, name: str, default: Any = None) -> Any:
        """Get a setting value by name"""
        return self.settings.get(name, default)

    def get_azure_parameters(self) -> AzureParameters:
        """Get the known Azure parameters as a typed model"""
        known = {
            key: value
            for key, value in self.azure_parameters.items()
            if key in AzureParameters.model_fields and value
        }
        return AzureParameters(**known)

    def get_azure_parameter(self, name: str, default: Any = None) -> Any:
        """Get a specific Azure parameter"""
        return self.azure_parameters.get(name, default)

    def is_tool_history_enabled(self) -> bool:
        """Check if tool invoke history is enabled"""
        return self.get_setting("tool_history_enabled", False)

    def get_tool_history_path(self) -> str:
        """Get the path for storing tool invoke history"""
        return self.get_setting("tool_history_path", ".history")

    def get_all_configuration(self) -> Dict[str, Any]:
        """Get all configuration settings with secrets masked"""
        azure_parameters = {
            key: ("***" if "secret" in key or "connection_string" in key else value)
            for key, value in self.azure_parameters.items()
        }
        return {
            "settings": dict(self.settings),
            "azure_parameters": azure_parameters,
            "path_settings": list(self.PATH_SETTINGS),
            "env_mapping": dict(self.ENV_MAPPING),
        }


# Create a global instance
env_manager = EnvironmentManager()
