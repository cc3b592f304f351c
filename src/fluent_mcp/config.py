"""
Configuration management for the server.

This module handles loading server configuration from a YAML configuration
file and environment variables.
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

# Environment variable -> (section, key); section None means top level
ENV_MAPPINGS = {
    "FLUENT_MCP_NAME": (None, "name"),
    "FLUENT_MCP_VERSION": (None, "version"),
    "FLUENT_MCP_TRANSPORT": ("transport", "type"),
    "FLUENT_MCP_HOST": ("transport", "host"),
    "FLUENT_MCP_PORT": ("transport", "port"),
    "FLUENT_MCP_LOG_LEVEL": ("logging", "level"),
    "FLUENT_MCP_LOG_FORMAT": ("logging", "format"),
    "FLUENT_MCP_LOG_FILE": ("logging", "file"),
}

_INT_KEYS = {"port"}


class ServerConfig:
    """
    Configuration manager for the server.

    Supports loading configuration from:
    1. Environment variables (highest priority)
    2. YAML configuration file
    3. Default values (applied by MCPServer)
    """

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to YAML config file.
                        Defaults to config/server.yaml
        """
        if config_file is None:
            # Default to config/server.yaml relative to project root
            project_root = Path(__file__).parent.parent.parent
            config_file = project_root / "config" / "server.yaml"

        self.config_file = Path(config_file)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r") as f:
                    self._config = yaml.safe_load(f) or {}
                logger.info(f"Loaded configuration from {self.config_file}")
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config file {self.config_file}: {e}")
                self._config = {}
        else:
            logger.debug(f"Config file not found: {self.config_file}")
            self._config = {}

    def get_server_config(self, use_env: bool = True) -> Dict[str, Any]:
        """
        Get the merged server configuration.

        The ``server`` section is flattened to the top level next to the
        ``transport`` and ``logging`` sections.

        Args:
            use_env: Whether to override with environment variables

        Returns:
            Configuration dictionary for MCPServer
        """
        config: Dict[str, Any] = dict(self._config.get("server") or {})
        for section in ("transport", "logging"):
            config[section] = dict(self._config.get(section) or {})

        if use_env:
            config = self._apply_env_overrides(config)

        return config

    def _apply_env_overrides(self, base_config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variable overrides to configuration.

        Args:
            base_config: Base configuration from YAML

        Returns:
            Configuration with environment variable overrides applied
        """
        config = {
            key: dict(value) if isinstance(value, dict) else value
            for key, value in base_config.items()
        }

        for env_var, (section, key) in ENV_MAPPINGS.items():
            value = os.getenv(env_var)
            if value is None or value == "":
                continue
            if key in _INT_KEYS:
                try:
                    value = int(value)
                except ValueError:
                    logger.warning(f"Ignoring non-integer {env_var}={value!r}")
                    continue
            target = config if section is None else config.setdefault(section, {})
            target[key] = value
            logger.debug(f"Config override from {env_var}")

        return config


def load_server_config(
    config_file: Optional[str] = None,
    use_env: bool = True,
) -> Dict[str, Any]:
    """
    Convenience function to load server configuration.

    Args:
        config_file: Optional path to YAML config file
        use_env: Whether to override with environment variables

    Returns:
        Configuration dictionary
    """
    return ServerConfig(config_file).get_server_config(use_env=use_env)
