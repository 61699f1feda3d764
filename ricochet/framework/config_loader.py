"""
================================================================================
Configuration Loader
================================================================================

Settings for a suite run: where the server lives, how long to wait for it,
and which credentials the OAuth password grant uses.

Values come from a YAML file and can be overridden per key by environment
variables, so secrets such as AUTH_PASSWORD never have to be written to disk.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from loguru import logger


DEFAULT_CONFIG_PATH = Path("config") / "config.yaml"

# Password-grant settings read by auth_settings(), with their fallbacks
AUTH_DEFAULTS = {
    "endpoint": "/oauth/token",
    "client_id": "",
    "client_secret": "",
    "username": "",
    "password": "",
}


class ConfigurationError(Exception):
    """Raised when suite setup or configuration cannot be completed."""
    pass


class ConfigLoader:
    """
    Read-only view of the run configuration.

    Lookup order for ``get("api.base_url")``:
        1. Environment variable API_BASE_URL
        2. ``api: {base_url: ...}`` in the YAML file
        3. The default passed by the caller

    Usage:
        >>> config = ConfigLoader("config/staging.yaml")
        >>> config.get("api.timeout", 30)
        30
        >>> registry.register("users").authenticate(**config.auth_settings())
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None) -> None:
        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config: Dict[str, Any] = self._load(self._config_path)

    @staticmethod
    def _load(path: Path) -> Dict[str, Any]:
        if not path.exists():
            logger.warning(
                f"Configuration file not found: {path}. "
                f"Using defaults and environment variables only."
            )
            return {}

        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {path}")

        logger.debug(f"Loaded configuration from: {path}")
        return loaded

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a dot-notation key.

        Environment values are strings; they are converted to the type of
        ``default`` when one is given.
        """
        env_value = os.environ.get(key.upper().replace(".", "_"))
        if env_value is not None:
            return self._coerce(env_value, default)

        value: Any = self._config
        for part in key.split("."):
            value = value.get(part) if isinstance(value, dict) else None
            if value is None:
                return default
        return value

    def auth_settings(self) -> Dict[str, str]:
        """
        Arguments for ``Suite.authenticate`` taken from the ``auth`` keys.

        Returns:
            Dict with endpoint, client_id, client_secret, username, password
        """
        return {
            name: str(self.get(f"auth.{name}", fallback))
            for name, fallback in AUTH_DEFAULTS.items()
        }

    @staticmethod
    def _coerce(value: str, reference: Any) -> Any:
        # bool before int: bool is an int subclass
        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        for kind in (int, float):
            if isinstance(reference, kind):
                try:
                    return kind(value)
                except ValueError:
                    return value
        return value


__all__ = [
    "AUTH_DEFAULTS",
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
]
