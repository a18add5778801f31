"""Device provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import DeviceConfig, GlobalConfig


class DeviceProvider(ABC):
    """Source of device configurations.

    `config` returns None for names the provider does not know. Failure of the
    underlying source raises ISAPIProviderUnavailableError.
    """

    @abstractmethod
    def list_names(self) -> list[str]:
        """Get all available device names."""

    @abstractmethod
    def config(self, name: str) -> DeviceConfig | None:
        """Get configuration of a device."""

    @abstractmethod
    def default_name(self) -> str | None:
        """Get default device name, None if no device is available."""

    def has(self, name: str) -> bool:
        """Check if device exists."""
        return name in self.list_names()

    def global_config(self) -> GlobalConfig:
        """Get settings shared by all devices."""
        return GlobalConfig()

    def clear_cache(self) -> None:
        """Drop cached device records, if any."""
