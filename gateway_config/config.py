"""Configuration loading for the gateway service."""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import voluptuous as vol
import yaml

from .const import (
    BUS_SESSION,
    BUS_SYSTEM,
    CONF_ADAPTER,
    CONF_BUS,
    CONF_LOG_LEVEL,
    CONF_MINER_TIMEOUT,
    DEFAULT_ADAPTER,
    DEFAULT_BUS,
    DEFAULT_CONFIG_PATH,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MINER_TIMEOUT,
)
from .errors import ConfigError

_LOGGER = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_ADAPTER, default=DEFAULT_ADAPTER): vol.All(str, vol.Length(min=1)),
        vol.Optional(CONF_BUS, default=DEFAULT_BUS): vol.In([BUS_SYSTEM, BUS_SESSION]),
        vol.Optional(CONF_MINER_TIMEOUT, default=DEFAULT_MINER_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)
        ),
        vol.Optional(CONF_LOG_LEVEL, default=DEFAULT_LOG_LEVEL): vol.All(
            vol.Upper, vol.In(LOG_LEVELS)
        ),
    }
)


def validate_config(raw: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Validate a raw configuration mapping and fill in defaults."""
    try:
        return CONFIG_SCHEMA(raw or {})
    except vol.Invalid as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the YAML configuration file.

    The path defaults to the CONFIG_PATH environment variable. A missing
    file yields the default configuration.
    """
    config_path = Path(path or os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH))

    if not config_path.exists():
        _LOGGER.info(f"No configuration at {config_path}, using defaults")
        return validate_config({})

    try:
        with open(config_path, "r") as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Error loading configuration {config_path}: {e}") from e

    if raw is not None and not isinstance(raw, dict):
        raise ConfigError(f"Configuration {config_path} must be a mapping")

    return validate_config(raw)
