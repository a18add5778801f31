"""Device provider backed by a configuration document."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from ..config import load_config, validate_config
from ..const import CONF_DEFAULT, CONF_DEVICES, CONF_FORMAT, CONF_LOGGING
from ..models import DeviceConfig, GlobalConfig
from .base import DeviceProvider


class StaticDeviceProvider(DeviceProvider):
    """Devices defined once in memory, e.g. loaded from a YAML file.

    Document layout::

        default: entrance
        format: json
        devices:
          entrance: {ip: 192.168.1.101, username: admin, password: secret}
    """

    def __init__(self, config: Mapping[str, Any] | None = None) -> None:
        """Initialize."""
        config = validate_config(config)
        self._devices = MappingProxyType({name: dict(device) for name, device in config[CONF_DEVICES].items()})
        self._default = config.get(CONF_DEFAULT)
        self._global_config = GlobalConfig.from_dict(
            {CONF_FORMAT: config[CONF_FORMAT], CONF_LOGGING: config[CONF_LOGGING]}
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> StaticDeviceProvider:
        return cls(load_config(path))

    def list_names(self) -> list[str]:
        return list(self._devices)

    def config(self, name: str) -> DeviceConfig | None:
        device = self._devices.get(name)
        if device is None:
            return None
        return DeviceConfig.from_dict(device, name)

    def default_name(self) -> str | None:
        if self._default:
            return self._default
        return next(iter(self._devices), None)

    def has(self, name: str) -> bool:
        return name in self._devices

    def global_config(self) -> GlobalConfig:
        return self._global_config
