"""Tests for registry settings and the environment configuration adapter."""

import logging

import pytest
from pydantic import ValidationError

from monitor_registry.infrastructure.config import (
    DEFAULT_SUBSCRIPTION_DURATION,
    DEFAULT_SUBSCRIPTION_FEE,
    RegistrySettings,
)
from monitor_registry.infrastructure.environment_configuration import (
    ENV_PREFIX,
    EnvironmentConfigurationAdapter,
)
from tests.builders import make_principal

OWNER = make_principal(1, "P")
ACCOUNT = make_principal(2, "P")


class TestRegistrySettings:
    """Test cases for RegistrySettings."""

    def test_defaults(self):
        settings = RegistrySettings(privileged_owner=OWNER, registry_account=ACCOUNT)

        assert settings.privileged_owner == OWNER
        assert settings.registry_account == ACCOUNT
        assert settings.subscription_duration == DEFAULT_SUBSCRIPTION_DURATION
        assert settings.subscription_fee == DEFAULT_SUBSCRIPTION_FEE
        assert settings.address_index_capacity == 20
        assert settings.user_index_capacity == 50
        assert settings.state_path is None
        assert settings.log_level == "INFO"
        assert settings.log_level_value == logging.INFO

    def test_log_level_normalized(self):
        settings = RegistrySettings(privileged_owner=OWNER, registry_account=ACCOUNT, log_level="debug")
        assert settings.log_level == "DEBUG"
        assert settings.log_level_value == logging.DEBUG

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError, match="Invalid log level"):
            RegistrySettings(privileged_owner=OWNER, registry_account=ACCOUNT, log_level="LOUD")

    def test_malformed_principal(self):
        with pytest.raises(ValidationError):
            RegistrySettings(privileged_owner="admin", registry_account=ACCOUNT)

    def test_accounts_must_differ(self):
        with pytest.raises(ValidationError, match="registry_account must differ"):
            RegistrySettings(privileged_owner=OWNER, registry_account=OWNER)

    @pytest.mark.parametrize("field", ["subscription_duration", "subscription_fee"])
    def test_initial_values_must_be_positive(self, field):
        with pytest.raises(ValidationError):
            RegistrySettings(privileged_owner=OWNER, registry_account=ACCOUNT, **{field: 0})

    def test_strict_integers(self):
        """Test that numeric strings are not coerced."""
        with pytest.raises(ValidationError):
            RegistrySettings(privileged_owner=OWNER, registry_account=ACCOUNT, subscription_fee="10")

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            RegistrySettings(privileged_owner=OWNER, registry_account=ACCOUNT, colour="blue")


class TestEnvironmentConfigurationAdapter:
    """Test cases for EnvironmentConfigurationAdapter."""

    def test_environment_overrides_defaults(self):
        adapter = EnvironmentConfigurationAdapter(
            defaults={"subscription_fee": 5},
            environ={f"{ENV_PREFIX}SUBSCRIPTION_FEE": "7"},
        )
        assert adapter.get_config_value("subscription_fee") == "7"

    def test_falls_back_to_defaults(self):
        adapter = EnvironmentConfigurationAdapter(defaults={"subscription_fee": 5}, environ={})
        assert adapter.get_config_value("subscription_fee") == 5
        assert adapter.get_config_value("missing", "fallback") == "fallback"

    def test_get_registry_settings(self):
        adapter = EnvironmentConfigurationAdapter(
            environ={
                "MONITOR_REGISTRY_PRIVILEGED_OWNER": OWNER,
                "MONITOR_REGISTRY_REGISTRY_ACCOUNT": ACCOUNT,
                "MONITOR_REGISTRY_SUBSCRIPTION_DURATION": "144",
                "MONITOR_REGISTRY_SUBSCRIPTION_FEE": "2500",
                "MONITOR_REGISTRY_ADDRESS_INDEX_CAPACITY": "5",
                "MONITOR_REGISTRY_STATE_PATH": "/var/lib/registry/state.msgpack",
                "MONITOR_REGISTRY_LOG_LEVEL": "warning",
                "UNRELATED": "ignored",
            }
        )

        settings = adapter.get_registry_settings()

        assert settings.privileged_owner == OWNER
        assert settings.subscription_duration == 144
        assert settings.subscription_fee == 2500
        assert settings.address_index_capacity == 5
        assert settings.user_index_capacity == 50
        assert settings.state_path == "/var/lib/registry/state.msgpack"
        assert settings.log_level == "WARNING"

    def test_custom_prefix(self):
        adapter = EnvironmentConfigurationAdapter(
            environ={"APP_PRIVILEGED_OWNER": OWNER, "APP_REGISTRY_ACCOUNT": ACCOUNT},
            prefix="APP_",
        )
        assert adapter.get_registry_settings().registry_account == ACCOUNT

    def test_non_integer_value(self):
        adapter = EnvironmentConfigurationAdapter(
            defaults={"privileged_owner": OWNER, "registry_account": ACCOUNT},
            environ={"MONITOR_REGISTRY_SUBSCRIPTION_FEE": "cheap"},
        )
        with pytest.raises(ValueError, match="MONITOR_REGISTRY_SUBSCRIPTION_FEE must be an integer"):
            adapter.get_registry_settings()

    def test_missing_owner(self):
        adapter = EnvironmentConfigurationAdapter(environ={})
        with pytest.raises(ValidationError):
            adapter.get_registry_settings()
