"""Configuration schemas and loader."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from pathlib import Path
from typing import Any

import voluptuous as vol
import yaml

from .const import (
    CONF_DEFAULT,
    CONF_DEVICES,
    CONF_FORMAT,
    CONF_HOST,
    CONF_IP,
    CONF_LOGGING,
    CONF_PASSWORD,
    CONF_PORT,
    CONF_PROTOCOL,
    CONF_TIMEOUT,
    CONF_USERNAME,
    CONF_VERIFY_SSL,
    DEFAULT_PORT,
    DEFAULT_PROTOCOL,
    DEFAULT_TIMEOUT,
    DEFAULT_VERIFY_SSL,
    PROTOCOLS,
    Format,
)
from .exceptions import ISAPIConfigError

_LOGGER = logging.getLogger(__name__)


def _normalize_device(value: Any) -> Any:
    """Drop empty columns and accept `ip` as an alias of `host`."""
    if not isinstance(value, Mapping):
        return value
    value = {key: item for key, item in value.items() if item is not None}
    if CONF_HOST not in value and CONF_IP in value:
        value[CONF_HOST] = value[CONF_IP]
    return value


DEVICE_SCHEMA = vol.All(
    _normalize_device,
    vol.Schema(
        {
            vol.Required(CONF_HOST): vol.All(vol.Coerce(str), vol.Length(min=1)),
            vol.Optional(CONF_PORT, default=DEFAULT_PORT): vol.All(vol.Coerce(int), vol.Range(min=1, max=65535)),
            vol.Optional(CONF_USERNAME, default=""): vol.Coerce(str),
            vol.Optional(CONF_PASSWORD, default=""): vol.Coerce(str),
            vol.Optional(CONF_PROTOCOL, default=DEFAULT_PROTOCOL): vol.All(str, vol.Lower, vol.In(PROTOCOLS)),
            vol.Optional(CONF_TIMEOUT, default=DEFAULT_TIMEOUT): vol.All(vol.Coerce(int), vol.Range(min=1)),
            vol.Optional(CONF_VERIFY_SSL, default=DEFAULT_VERIFY_SSL): vol.Boolean(),
        },
        extra=vol.REMOVE_EXTRA,
    ),
)

LOGGING_SCHEMA = vol.Schema(
    {
        vol.Optional("enabled", default=True): vol.Boolean(),
        vol.Optional("level", default="debug"): vol.All(str, vol.Lower),
    },
    extra=vol.ALLOW_EXTRA,
)

GLOBAL_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_FORMAT, default=Format.JSON.value): vol.All(
            str, vol.Lower, vol.In([item.value for item in Format])
        ),
        vol.Optional(CONF_LOGGING, default=dict): LOGGING_SCHEMA,
    },
    extra=vol.ALLOW_EXTRA,
)

# Device entries are validated one at a time when a client is built
CONFIG_SCHEMA = GLOBAL_SCHEMA.extend(
    {
        vol.Optional(CONF_DEFAULT): vol.Any(None, str),
        vol.Optional(CONF_DEVICES, default=dict): vol.Any(None, {str: Mapping}),
    }
)


def validate_config(config: Mapping[str, Any] | None) -> dict[str, Any]:
    """Validate a configuration document."""
    try:
        validated = CONFIG_SCHEMA(dict(config or {}))
    except vol.Invalid as ex:
        raise ISAPIConfigError(f"Invalid configuration: {ex}") from ex
    if validated.get(CONF_DEVICES) is None:
        validated[CONF_DEVICES] = {}
    return validated


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and validate a YAML configuration document."""
    _LOGGER.debug("Loading device configuration from %s", path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as ex:
        raise ISAPIConfigError(f"Cannot read configuration {path}: {ex}") from ex
    return validate_config(data)
