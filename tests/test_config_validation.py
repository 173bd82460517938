"""Tests for configuration validation with Pydantic."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from expbackoff.domain.config import BackoffConfig
from expbackoff.domain.errors import ConfigurationError
from expbackoff.infrastructure.config.config_manager import ConfigManager


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ConfigManager.ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)


class TestBackoffConfigValidation:
    """Tests for BackoffConfig validation."""

    def test_defaults(self):
        """Test default configuration"""
        config = BackoffConfig()
        assert config.max_attempts == 100
        assert config.delay_interval == 100
        assert config.base == 2
        assert config.max_exponent == 10
        assert config.throw_on_exhaustion is True
        assert config.seed is None
        assert config.non_blocking_timer is False

    def test_camel_case_aliases(self):
        """Test camelCase option names"""
        config = BackoffConfig.model_validate(
            {
                "maxAttempts": 5,
                "delayInterval": 10,
                "maxExponent": 3,
                "throwOnExhaustion": False,
                "nonBlockingTimer": True,
            }
        )
        assert config.max_attempts == 5
        assert config.delay_interval == 10
        assert config.max_exponent == 3
        assert config.throw_on_exhaustion is False
        assert config.non_blocking_timer is True

    def test_unknown_options_ignored(self):
        config = BackoffConfig.model_validate({"seed": 3, "jitter": 0.5})
        assert config.seed == 3
        assert not hasattr(config, "jitter")

    def test_max_attempts_zero(self):
        """Test max_attempts must be positive"""
        with pytest.raises(ValidationError, match="max_attempts"):
            BackoffConfig(max_attempts=0)

    def test_delay_interval_zero(self):
        with pytest.raises(ValidationError, match="delay_interval"):
            BackoffConfig(delay_interval=0)

    def test_base_must_exceed_one(self):
        """Test base of 1 would never grow"""
        with pytest.raises(ValidationError, match="base"):
            BackoffConfig(base=1)

    def test_max_exponent_negative(self):
        with pytest.raises(ValidationError, match="max_exponent"):
            BackoffConfig(max_exponent=-1)

    def test_max_exponent_zero_allowed(self):
        assert BackoffConfig(max_exponent=0).max_exponent == 0

    def test_config_is_immutable(self):
        config = BackoffConfig()
        with pytest.raises(ValidationError):
            config.max_attempts = 3


class TestFromOptions:
    """Tests for BackoffConfig.from_options"""

    def test_none_gives_defaults(self):
        assert BackoffConfig.from_options(None) == BackoffConfig()

    def test_model_passes_through(self):
        config = BackoffConfig(seed=1)
        assert BackoffConfig.from_options(config) is config

    def test_invalid_value(self):
        with pytest.raises(ConfigurationError) as exc_info:
            BackoffConfig.from_options({"base": 0, "delayInterval": -5})
        message = str(exc_info.value)
        assert "Configuration validation failed" in message
        assert "base" in message

    def test_not_a_mapping(self):
        with pytest.raises(ConfigurationError, match="mapping"):
            BackoffConfig.from_options([("seed", 1)])


class TestConfigManager:
    """Tests for ConfigManager"""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        manager = ConfigManager()
        assert manager.config_path is None
        assert manager.get_backoff_config() == BackoffConfig()

    def test_load_top_level_file(self, tmp_path):
        config_file = tmp_path / ".expbackoff.yml"
        config_file.write_text(yaml.dump({"max_attempts": 7, "seed": 12}), encoding="utf-8")

        manager = ConfigManager(config_path=config_file)

        assert manager.config.max_attempts == 7
        assert manager.config.seed == 12

    def test_load_backoff_section(self, tmp_path):
        config_file = tmp_path / "custom.yml"
        config_file.write_text(
            yaml.dump({"backoff": {"delayInterval": 250, "base": 3}}), encoding="utf-8"
        )

        manager = ConfigManager(config_path=str(config_file))

        assert isinstance(manager.config_path, Path)
        assert manager.config.delay_interval == 250
        assert manager.config.base == 3

    def test_finds_file_in_parent_directory(self, tmp_path, monkeypatch):
        (tmp_path / ".expbackoff.yml").write_text("max_exponent: 4\n", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        manager = ConfigManager()

        assert manager.config_path == tmp_path / ".expbackoff.yml"
        assert manager.config.max_exponent == 4

    def test_env_overrides(self, tmp_path, monkeypatch):
        config_file = tmp_path / ".expbackoff.yml"
        config_file.write_text("maxAttempts: 7\nthrowOnExhaustion: true\n", encoding="utf-8")
        monkeypatch.setenv("EXPBACKOFF_MAX_ATTEMPTS", "2")
        monkeypatch.setenv("EXPBACKOFF_THROW_ON_EXHAUSTION", "false")
        monkeypatch.setenv("EXPBACKOFF_SEED", "99")

        manager = ConfigManager(config_path=config_file)

        assert manager.config.max_attempts == 2
        assert manager.config.throw_on_exhaustion is False
        assert manager.config.seed == 99

    def test_invalid_file_value(self, tmp_path):
        config_file = tmp_path / ".expbackoff.yml"
        config_file.write_text("max_attempts: -3\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="max_attempts"):
            ConfigManager(config_path=config_file)

    def test_malformed_yaml(self, tmp_path):
        config_file = tmp_path / ".expbackoff.yml"
        config_file.write_text("max_attempts: [1, 2\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Failed to load"):
            ConfigManager(config_path=config_file)

    def test_file_must_be_mapping(self, tmp_path):
        config_file = tmp_path / ".expbackoff.yml"
        config_file.write_text("- 1\n- 2\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigManager(config_path=config_file)

    def test_with_overrides(self, tmp_path):
        config_file = tmp_path / ".expbackoff.yml"
        config_file.write_text("seed: 1\nbase: 3\n", encoding="utf-8")
        manager = ConfigManager(config_path=config_file)

        config = manager.with_overrides(seed=5, base=None)

        assert config.seed == 5
        assert config.base == 3

    def test_get(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        manager = ConfigManager()
        assert manager.get("max_attempts") == 100
        assert manager.get("missing", "fallback") == "fallback"
