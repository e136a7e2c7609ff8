"""Infrastructure adapter for environment-based configuration.

This adapter builds ``RegistrySettings`` from environment variables and
defaults, providing configuration in a testable way.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from .config import RegistrySettings

ENV_PREFIX = "MONITOR_REGISTRY_"

_INT_KEYS = (
    "subscription_duration",
    "subscription_fee",
    "address_index_capacity",
    "user_index_capacity",
)
_STR_KEYS = ("privileged_owner", "registry_account", "state_path", "log_level")


class EnvironmentConfigurationAdapter:
    """Environment-based source of registry settings."""

    def __init__(
        self,
        defaults: dict[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
        prefix: str = ENV_PREFIX,
    ) -> None:
        """Initialize the configuration adapter.

        Args:
            defaults: Values used when a variable is not set
            environ: Environment mapping (default: ``os.environ``)
            prefix: Prefix shared by all registry variables
        """
        self._defaults = defaults or {}
        self._environ = environ if environ is not None else os.environ
        self._prefix = prefix

    def get_config_value(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by key.

        Args:
            key: Setting name without prefix (e.g. ``subscription_fee``)
            default: Default value if neither environment nor defaults have it

        Returns:
            Configuration value or default
        """
        env_key = f"{self._prefix}{key.upper()}"
        if env_key in self._environ:
            return self._environ[env_key]
        return self._defaults.get(key, default)

    def get_registry_settings(self) -> RegistrySettings:
        """Build validated settings.

        Raises:
            ValueError: If an integer variable is not a number
            pydantic.ValidationError: If the resulting settings are invalid
        """
        values: dict[str, Any] = {}
        for key in _STR_KEYS:
            value = self.get_config_value(key)
            if value is not None:
                values[key] = value
        for key in _INT_KEYS:
            value = self.get_config_value(key)
            if value is None:
                continue
            try:
                values[key] = int(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"{self._prefix}{key.upper()} must be an integer, got {value!r}") from e
        return RegistrySettings(**values)
