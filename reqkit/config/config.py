import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

import yaml

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "client.yaml")


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


@dataclass
class ClientConfig:
    log_level: str = "INFO"
    user_agent: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


def load_config(path: Optional[str] = None) -> ClientConfig:
    """Load client configuration from environment and a YAML file.

    Args:
        path: YAML file to read. Falls back to $REQKIT_CONFIG, then to the
            bundled client.yaml.

    Returns:
        A validated ClientConfig instance.

    Raises:
        ConfigurationError: If the log level or the YAML contents are invalid.
        FileNotFoundError: If the YAML configuration file is not found.
        yaml.YAMLError: If the YAML file contains invalid syntax.
    """
    path = path or os.getenv("REQKIT_CONFIG", "").strip() or DEFAULT_CONFIG_PATH

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"Invalid LOG_LEVEL: {log_level}")

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a mapping at top level")

    headers = data.get("headers") or {}
    if not isinstance(headers, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in headers.items()
    ):
        raise ConfigurationError(f"{path}: 'headers' must map header names to strings")

    user_agent = os.getenv("REQKIT_USER_AGENT", "").strip() or data.get("user_agent")

    return ClientConfig(
        log_level=log_level,
        user_agent=user_agent,
        headers=headers,
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level)
