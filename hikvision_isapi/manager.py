"""Access to multiple Hikvision devices by name."""

from __future__ import annotations

from collections.abc import Mapping
import logging
import threading
from typing import Any

from .auth import Authenticator
from .client import ISAPIClient
from .exceptions import ISAPIDeviceNotFoundError, ISAPINoDeviceAvailableError
from .models import DeviceConfig, DeviceContext
from .providers import DeviceProvider, StaticDeviceProvider

_LOGGER = logging.getLogger(__name__)


class DeviceManager:
    """Resolves device names to ISAPI clients.

    Clients are built on first access from the active provider and cached by
    name until `reload`, `clear_clients` or `set_provider` is called. Those
    calls drop cached clients without closing them, as callers may still hold
    them; whoever keeps a dropped client closes it. `close` closes all cached
    clients.
    """

    def __init__(
        self,
        provider: DeviceProvider | Mapping[str, Any] | None = None,
        authenticator: Authenticator | None = None,
    ) -> None:
        """Initialize."""
        if provider is None or isinstance(provider, Mapping):
            provider = StaticDeviceProvider(provider)
        self._provider: DeviceProvider = provider
        self._authenticator = authenticator
        self._clients: dict[str, ISAPIClient] = {}
        self._lock = threading.Lock()
        # bumped on every provider swap or cache clear
        self._generation = 0

    @property
    def provider(self) -> DeviceProvider:
        return self._provider

    def resolve(self, name: str | None = None) -> ISAPIClient:
        """Get client of a device, the provider default if name is None."""
        with self._lock:
            provider = self._provider
            generation = self._generation

        if name is None:
            name = provider.default_name()
        if name is None:
            raise ISAPINoDeviceAvailableError

        with self._lock:
            if client := self._clients.get(name):
                return client

        client = self._create_client(provider, name)

        with self._lock:
            if generation != self._generation:
                # built against a provider that has been replaced meanwhile
                return client
            cached = self._clients.setdefault(name, client)
        if cached is not client:
            client.close()
        return cached

    def default(self) -> ISAPIClient:
        """Get client of the default device."""
        return self.resolve()

    def switch_device(self, name: str) -> ISAPIClient:
        """Get client of a device known to the provider."""
        if not self.has_device(name):
            raise ISAPIDeviceNotFoundError(name)
        return self.resolve(name)

    def list_devices(self) -> list[str]:
        return self._provider.list_names()

    def has_device(self, name: str) -> bool:
        return self._provider.has(name)

    def set_provider(self, provider: DeviceProvider) -> None:
        """Replace device provider, cached clients are dropped."""
        with self._lock:
            self._provider = provider
            self._clients = {}
            self._generation += 1
        _LOGGER.debug("Device provider set to %s", type(provider).__name__)

    def register_device(self, name: str, config: Mapping[str, Any] | DeviceConfig) -> ISAPIClient:
        """Add client for a device unknown to the provider.

        Runtime only, the device is lost when the cache is cleared. A client
        previously cached under the same name is closed.
        """
        with self._lock:
            provider = self._provider
        context = DeviceContext(name, DeviceConfig.from_dict(config, name), provider.global_config())
        client = ISAPIClient(context, self._authenticator)
        with self._lock:
            replaced = self._clients.get(name)
            self._clients[name] = client
        if replaced is not None:
            replaced.close()
        return client

    def clear_clients(self) -> None:
        with self._lock:
            self._clients = {}
            self._generation += 1

    def reload(self) -> None:
        """Drop cached clients and provider records, next resolve reads the source."""
        self.clear_clients()
        self._provider.clear_cache()

    def close(self) -> None:
        """Close HTTP sessions of cached clients."""
        with self._lock:
            clients, self._clients = self._clients, {}
            self._generation += 1
        for client in clients.values():
            client.close()

    def _create_client(self, provider: DeviceProvider, name: str) -> ISAPIClient:
        device = provider.config(name)
        if device is None:
            raise ISAPIDeviceNotFoundError(name)

        context = DeviceContext(name, device, provider.global_config())
        _LOGGER.debug("Creating ISAPI client for %s at %s", name, context.base_url)
        return ISAPIClient(context, self._authenticator)
