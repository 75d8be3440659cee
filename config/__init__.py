"""
Configuration Module for the Fiscal Stamping Engine.

Layout constants, wrap widths, sentinels and logging options live in
settings.yaml next to this file. Every consumer passes its own default to
get_config(), so a missing key never changes engine behavior.

The settings file is chosen in this order: the path given to the first
ConfigurationManager() call, the FISCAL_STAMP_CONFIG environment variable,
then config/settings.yaml.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_ENV_VAR = "FISCAL_STAMP_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "settings.yaml"


class ConfigurationManager:
    """
    Process-wide settings loaded once from YAML.

    Attributes:
        config_path (Path): Settings file in use.

    Example:
        >>> config = ConfigurationManager()
        >>> config.get("stamp.layout.title_wrap")
        30
        >>> config.get("rules.not_found_value")
        'N/A'
    """

    _instance: Optional['ConfigurationManager'] = None

    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._load(cls._resolve_path(config_path))
            cls._instance = instance
        return cls._instance

    @staticmethod
    def _resolve_path(config_path: Optional[str]) -> Path:
        if config_path:
            return Path(config_path)
        if os.environ.get(CONFIG_ENV_VAR):
            return Path(os.environ[CONFIG_ENV_VAR])
        return DEFAULT_CONFIG_PATH

    def _load(self, config_path: Path) -> None:
        """
        Read the settings file.

        Raises:
            FileNotFoundError: If the settings file doesn't exist.
            yaml.YAMLError: If the settings file is not valid YAML.
        """
        if not config_path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            settings = yaml.safe_load(f) or {}

        if not isinstance(settings, dict):
            raise yaml.YAMLError(f"Configuration root must be a mapping: {config_path}")

        self.config_path = config_path
        self._settings: Dict[str, Any] = settings

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a dotted key such as "stamp.layout.title_wrap".

        Args:
            key: Dotted path into the settings tree.
            default: Returned when any part of the path is missing.

        Returns:
            Configuration value or default.
        """
        node: Any = self._settings
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    @classmethod
    def reset(cls) -> None:
        """Forget the loaded settings; the next call reloads them."""
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """Shortcut for ConfigurationManager().get(key, default)."""
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config', 'CONFIG_ENV_VAR']
