"""
User configuration management for Keyport.

Configuration sources, highest precedence first:
1. Environment variables
2. Command-line provided config file
3. Config file in current directory
4. User's XDG config directory
5. Default values
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from keyport.config.models import UserConfigData
from keyport.core.errors import ConfigError
from keyport.core.logging import get_logger


logger = get_logger(__name__)

ENV_PREFIX = "KEYPORT_"


class UserConfig:
    """Manages user-specific configuration for Keyport."""

    def __init__(self, cli_config_path: str | Path | None = None):
        """
        Initialize the user configuration handler.

        Args:
            cli_config_path: Optional config file path provided via CLI

        Raises:
            ConfigError: If the explicit config file is missing, or any found
                file is not valid YAML or holds invalid values
        """
        self._config_sources: dict[str, str] = {}
        self._config_path: Path | None = None
        self._cli_config_path = (
            Path(cli_config_path).expanduser().resolve() if cli_config_path else None
        )
        self._config_paths = self._generate_config_paths()
        self._load_config()

    def _generate_config_paths(self) -> list[Path]:
        """Generate a list of config paths to search in order of precedence."""
        config_paths = []

        if self._cli_config_path:
            config_paths.append(self._cli_config_path)

        config_paths.extend([Path.cwd() / "keyport.yaml", Path.cwd() / ".keyport.yml"])

        xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
        config_home = (
            Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
        )
        config_paths.append(config_home / "keyport" / "config.yaml")

        return config_paths

    def _load_config(self) -> None:
        if self._cli_config_path and not self._cli_config_path.is_file():
            raise ConfigError(f"Config file not found: {self._cli_config_path}")

        config_data: dict[str, Any] = {}
        for path in self._config_paths:
            if path.is_file():
                config_data = self._read_yaml(path)
                self._config_path = path
                self._track_file_sources(config_data, path.name)
                logger.debug("Loaded user configuration from %s", path)
                break
        else:
            logger.debug("No user configuration files found, using defaults")

        try:
            self._config = UserConfigData(**config_data)
        except ValidationError as e:
            raise ConfigError(
                f"Invalid configuration: {e}",
                {"path": str(self._config_path) if self._config_path else None},
            ) from e

        self._track_env_var_sources()

    @staticmethod
    def _read_yaml(path: Path) -> dict[str, Any]:
        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing config file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Error reading config file {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid config file format: {path}")
        return data

    def _track_file_sources(
        self, data: dict[str, Any], filename: str, prefix: str = ""
    ) -> None:
        for key, value in data.items():
            current_key = f"{prefix}.{key}" if prefix else key
            if isinstance(value, dict):
                self._track_file_sources(value, filename, current_key)
            else:
                self._config_sources[current_key] = f"file:{filename}"

    def _track_env_var_sources(self) -> None:
        for env_name in os.environ:
            if not env_name.upper().startswith(ENV_PREFIX):
                continue
            config_key = env_name[len(ENV_PREFIX) :].lower().replace("__", ".")
            if config_key.split(".")[0] in UserConfigData.model_fields:
                self._config_sources[config_key] = "environment"

    @property
    def data(self) -> UserConfigData:
        return self._config

    @property
    def config_path(self) -> Path | None:
        """The config file that was loaded, if any."""
        return self._config_path

    def get_source(self, key: str) -> str:
        """
        Get the source of a configuration value.

        Returns:
            ``environment``, ``file:<name>`` or ``default``
        """
        return self._config_sources.get(key, "default")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation (``export.tool_name``)."""
        current: Any = self._config
        for part in key.split("."):
            if not hasattr(current, part):
                return default
            current = getattr(current, part)
        return current

    def get_log_level_int(self) -> int:
        """The configured log level as a ``logging`` constant."""
        level: int = getattr(logging, self._config.log_level, logging.WARNING)
        return level


def create_user_config(cli_config_path: str | Path | None = None) -> UserConfig:
    """
    Create a UserConfig instance.

    Args:
        cli_config_path: Optional config file path provided via CLI

    Returns:
        Configured UserConfig instance
    """
    return UserConfig(cli_config_path=cli_config_path)
