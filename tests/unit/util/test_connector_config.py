"""Unit tests for configuration loading and validation."""

import json

import pytest

from fecru_connector.config import DEFAULT_TIMEOUT, ConnectorConfig, load_config
from fecru_connector.errors import ConfigurationError


class TestConnectorConfig:
    """Test ConnectorConfig data class."""

    def test_defaults(self):
        config = ConnectorConfig(host="https://fecru.example.com", username="alice")
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.use_access_token is True
        assert config.ignore_ssl_error is False
        assert config.web_context is None

    def test_normalizes_host_and_web_context(self):
        config = ConnectorConfig(
            host="https://fecru.example.com/", username="alice", web_context="/fecru/"
        )
        assert config.host == "https://fecru.example.com"
        assert config.web_context == "fecru"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"host": "", "username": "alice"},
            {"host": "https://h", "username": ""},
            {"host": "ftp://h", "username": "alice"},
            {"host": "https://h", "username": "alice", "timeout": 0},
            {"host": "https://h", "username": "alice", "timeout": 301},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            ConnectorConfig(**kwargs)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            ConnectorConfig(host="", username="alice")


class TestLoadConfig:
    """Test loading configuration from file and environment."""

    @pytest.fixture
    def config_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "host": "https://file.example.com",
                    "username": "alice",
                    "password": "secret",
                    "timeout": 10,
                }
            )
        )
        path.chmod(0o600)
        return path

    def test_load_from_file(self, config_file):
        config = load_config(str(config_file))
        assert config.host == "https://file.example.com"
        assert config.password == "secret"
        assert config.timeout == 10

    def test_environment_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv("FECRU_HOST", "https://env.example.com")
        monkeypatch.setenv("FECRU_USE_ACCESS_TOKEN", "no")
        monkeypatch.setenv("FECRU_TIMEOUT", "45")

        config = load_config(str(config_file), use_env=True)

        assert config.host == "https://env.example.com"
        assert config.username == "alice"
        assert config.use_access_token is False
        assert config.timeout == 45

    def test_environment_only(self, monkeypatch):
        monkeypatch.setenv("FECRU_HOST", "http://localhost:8060")
        monkeypatch.setenv("FECRU_USERNAME", "bob")
        monkeypatch.setenv("FECRU_IGNORE_SSL_ERROR", "TRUE")
        monkeypatch.setenv("FECRU_WEB_CONTEXT", "/fecru")

        config = load_config(use_env=True)

        assert config.username == "bob"
        assert config.ignore_ssl_error is True
        assert config.web_context == "fecru"

    def test_missing_field_has_fix_hint(self, monkeypatch):
        monkeypatch.delenv("FECRU_HOST", raising=False)
        monkeypatch.setenv("FECRU_USERNAME", "bob")

        with pytest.raises(ConfigurationError, match="FECRU_HOST"):
            load_config(use_env=True)

    def test_invalid_boolean_rejected(self, monkeypatch):
        monkeypatch.setenv("FECRU_HOST", "https://h")
        monkeypatch.setenv("FECRU_USERNAME", "bob")
        monkeypatch.setenv("FECRU_USE_ACCESS_TOKEN", "maybe")

        with pytest.raises(ConfigurationError):
            load_config(use_env=True)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "absent.json"))

    def test_insecure_permissions_warn(self, config_file, caplog):
        config_file.chmod(0o644)
        load_config(str(config_file))
        assert "insecure permissions" in caplog.text
