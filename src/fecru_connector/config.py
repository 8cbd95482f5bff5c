"""Connector configuration.

Loads and validates connection settings from a JSON file and/or
environment variables.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigurationError

DEFAULT_TIMEOUT = 30
DEFAULT_CONFIG_PATH = Path.home() / ".fecru" / "config.json"
MIN_TIMEOUT = 1
MAX_TIMEOUT = 300

TRUE_VALUES = ("1", "true", "yes")
FALSE_VALUES = ("0", "false", "no")

ENV_VARIABLES = {
    "FECRU_HOST": "host",
    "FECRU_USERNAME": "username",
    "FECRU_PASSWORD": "password",
    "FECRU_WEB_CONTEXT": "web_context",
    "FECRU_USE_ACCESS_TOKEN": "use_access_token",
    "FECRU_IGNORE_SSL_ERROR": "ignore_ssl_error",
    "FECRU_TIMEOUT": "timeout",
}

logger = logging.getLogger(__name__)


def parse_bool(value: Any, name: str) -> bool:
    """Interpret ``1/0/true/false/yes/no`` (any case) as a boolean."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean (true/false). Got: {value!r}")


@dataclass
class ConnectorConfig:
    """Connection settings for a FishEye/Crucible server.

    Args:
        host: Server URL including scheme and port (http or https)
        username: Username for basic authentication and login
        password: Password for basic authentication and login
        web_context: Optional context path the server is deployed under
        use_access_token: Exchange the credentials for an access token
        ignore_ssl_error: Accept untrusted TLS certificates
        timeout: Request timeout in seconds (1-300, default: 30)
    """

    host: str
    username: str
    password: str = ""
    web_context: Optional[str] = None
    use_access_token: bool = True
    ignore_ssl_error: bool = False
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.host:
            raise ConfigurationError("host cannot be empty")

        if not self.username:
            raise ConfigurationError("username cannot be empty")

        if not self.host.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"host must start with http:// or https://. Got: {self.host[:20]}..."
            )

        if self.timeout < MIN_TIMEOUT or self.timeout > MAX_TIMEOUT:
            raise ConfigurationError(
                f"timeout must be between {MIN_TIMEOUT} and {MAX_TIMEOUT} seconds. "
                f"Got: {self.timeout}"
            )

        self.host = self.host.rstrip("/")
        if self.web_context is not None:
            self.web_context = self.web_context.strip("/") or None


def load_config(
    config_path: Optional[str] = None, use_env: bool = False
) -> ConnectorConfig:
    """Load configuration from file and/or environment variables.

    Args:
        config_path: Path to config JSON file (default: ~/.fecru/config.json)
        use_env: Whether to use environment variables (overrides file config)

    Returns:
        ConnectorConfig instance

    Raises:
        FileNotFoundError: If config file not found
        json.JSONDecodeError: If config file contains invalid JSON
        ConfigurationError: If required fields are missing or invalid

    Environment Variables:
        FECRU_HOST, FECRU_USERNAME, FECRU_PASSWORD, FECRU_WEB_CONTEXT,
        FECRU_USE_ACCESS_TOKEN, FECRU_IGNORE_SSL_ERROR, FECRU_TIMEOUT
    """
    config_data: Dict[str, Any] = {}

    if config_path is not None or not use_env:
        path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        path = path.expanduser().resolve()

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        file_perms = os.stat(path).st_mode & 0o777
        if file_perms & 0o077:
            logger.warning(
                f"Configuration file {path} has insecure permissions {oct(file_perms)}. "
                f"Recommend setting to 0600: chmod 0600 {path}"
            )

        with open(path) as f:
            config_data = json.load(f)

    if use_env:
        for variable, key in ENV_VARIABLES.items():
            if variable in os.environ:
                config_data[key] = os.environ[variable]

    for key in ("host", "username"):
        if key not in config_data:
            raise ConfigurationError(
                f"Missing required field: {key}\n"
                f"  Fix: Set FECRU_{key.upper()} environment variable\n"
                f"  Or: Add '{key}' to {DEFAULT_CONFIG_PATH}"
            )

    for key in ("use_access_token", "ignore_ssl_error"):
        if key in config_data:
            config_data[key] = parse_bool(config_data[key], key)

    if "timeout" in config_data:
        try:
            config_data["timeout"] = float(config_data["timeout"])
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"timeout must be a number. Got: {config_data['timeout']!r}"
            )

    unknown = set(config_data) - set(ENV_VARIABLES.values())
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {sorted(unknown)}")
        for key in unknown:
            del config_data[key]

    return ConnectorConfig(**config_data)
