"""Device provider delegating to user callbacks."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
import json
import logging
import threading
import time
from typing import Any

from ..const import (
    CONF_HOST,
    CONF_PASSWORD,
    CONF_PORT,
    CONF_PROTOCOL,
    CONF_TIMEOUT,
    CONF_USERNAME,
    CONF_VERIFY_SSL,
    DEFAULT_CACHE_TTL,
    DEFAULT_NAME_COLUMN,
    DEFAULT_PORT,
    DEFAULT_PROTOCOL,
    DEFAULT_TIMEOUT,
    DEFAULT_VERIFY_SSL,
)
from ..exceptions import ISAPIError, ISAPIProviderUnavailableError
from ..models import DeviceConfig, GlobalConfig
from .base import DeviceProvider

DeviceRecord = Mapping[str, Any] | DeviceConfig

_LOGGER = logging.getLogger(__name__)


def _attr(row: Any, *names: str, default: Any = None) -> Any:
    """Get first non empty attribute of a mapping or object row."""
    for name in names:
        value = row.get(name) if isinstance(row, Mapping) else getattr(row, name, None)
        if value is not None:
            return value
    return default


class MemoryCache:
    """In-process key/value store with the redis `get` / `set(ex=)` / `delete` signature."""

    def __init__(self) -> None:
        """Initialize."""
        self._data: dict[str, tuple[Any, float | None]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        with self._lock:
            value, expires = self._data.get(key, (None, None))
            if expires is not None and time.monotonic() >= expires:
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: Any, ex: int | None = None) -> None:
        with self._lock:
            self._data[key] = (value, time.monotonic() + ex if ex else None)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class CallbackDeviceProvider(DeviceProvider):
    """Devices loaded from callbacks: API, Redis, ORM or any custom source.

    `default` is either a device name or a callable evaluated on each call,
    which allows request scoped defaults in multi-tenant applications.
    `clear_cache` is called on reload to drop whatever the callbacks remember.
    """

    def __init__(
        self,
        names: Callable[[], Iterable[str]],
        config: Callable[[str], DeviceRecord | None],
        default: str | Callable[[], str | None] | None = None,
        has: Callable[[str], bool] | None = None,
        global_config: Mapping[str, Any] | GlobalConfig | None = None,
        clear_cache: Callable[[], None] | None = None,
    ) -> None:
        """Initialize."""
        self._names = names
        self._config = config
        self._default = default
        self._has = has
        self._clear_cache = clear_cache
        self._global_config = GlobalConfig.from_dict(global_config)

    def _call(self, callback: Callable, *args: Any) -> Any:
        try:
            return callback(*args)
        except ISAPIError:
            raise
        except Exception as ex:  # pylint: disable=broad-except
            _LOGGER.warning("Device provider callback failed: %s", ex)
            raise ISAPIProviderUnavailableError(f"Device provider callback failed: {ex}") from ex

    def list_names(self) -> list[str]:
        return list(self._call(self._names))

    def config(self, name: str) -> DeviceConfig | None:
        device = self._call(self._config, name)
        if device is None:
            return None
        return DeviceConfig.from_dict(device, name)

    def default_name(self) -> str | None:
        if callable(self._default):
            return self._call(self._default)
        return self._default

    def has(self, name: str) -> bool:
        if self._has:
            return bool(self._call(self._has, name))
        return name in self.list_names()

    def global_config(self) -> GlobalConfig:
        return self._global_config

    def clear_cache(self) -> None:
        if self._clear_cache:
            self._call(self._clear_cache)

    @classmethod
    def from_mapping(
        cls,
        devices: Mapping[str, DeviceRecord],
        default: str | None = None,
        **kwargs: Any,
    ) -> CallbackDeviceProvider:
        """Create provider from a mapping of device name to config."""
        return cls(
            names=lambda: list(devices),
            config=devices.get,
            default=default if default is not None else next(iter(devices), None),
            has=lambda name: name in devices,
            **kwargs,
        )

    @classmethod
    def from_query(
        cls,
        query: Callable[[], Iterable[Any]],
        name_column: str = DEFAULT_NAME_COLUMN,
        config_map: Mapping[str, str] | None = None,
        default: str | None = None,
        **kwargs: Any,
    ) -> CallbackDeviceProvider:
        """Create provider from ORM query results.

        `query` is executed on first use and again after `clear_cache`. It returns
        rows as mappings or objects, e.g. ``lambda: session.scalars(select(Terminal)).all()``.
        `config_map` maps config keys to row attributes.
        """
        rows: list[Any] | None = None
        lock = threading.Lock()

        def load_rows() -> list[Any]:
            nonlocal rows
            with lock:
                if rows is None:
                    rows = list(query())
            return rows

        def find(name: str) -> Any:
            for row in load_rows():
                if str(_attr(row, name_column)) == name:
                    return row
            return None

        def device_config(name: str) -> dict[str, Any] | None:
            row = find(name)
            if row is None:
                return None
            if config_map:
                return {key: _attr(row, attribute) for key, attribute in config_map.items()}
            return {
                CONF_HOST: _attr(row, "ip", "ip_address", "host"),
                CONF_PORT: _attr(row, "port", default=DEFAULT_PORT),
                CONF_USERNAME: _attr(row, "username", default="admin"),
                CONF_PASSWORD: _attr(row, "password"),
                CONF_PROTOCOL: _attr(row, "protocol", default=DEFAULT_PROTOCOL),
                CONF_TIMEOUT: _attr(row, "timeout", default=DEFAULT_TIMEOUT),
                CONF_VERIFY_SSL: _attr(row, "verify_ssl", default=DEFAULT_VERIFY_SSL),
            }

        def default_name() -> str | None:
            if default is not None:
                return default
            names = [str(_attr(row, name_column)) for row in load_rows()]
            return names[0] if names else None

        def reset_rows() -> None:
            nonlocal rows
            with lock:
                rows = None

        return cls(
            names=lambda: [str(_attr(row, name_column)) for row in load_rows()],
            config=device_config,
            default=default_name,
            has=lambda name: find(name) is not None,
            clear_cache=reset_rows,
            **kwargs,
        )

    @classmethod
    def from_cache(
        cls,
        loader: Callable[[], Mapping[str, Mapping[str, Any]]],
        cache_key: str = "hikvision_devices",
        ttl: int = DEFAULT_CACHE_TTL,
        cache: Any = None,
        default: str | None = None,
        **kwargs: Any,
    ) -> CallbackDeviceProvider:
        """Create provider remembering `loader` results in a cache for `ttl` seconds.

        `cache` is any store with redis-style ``get(key)``,
        ``set(key, value, ex=ttl)`` and ``delete(key)``, e.g. ``redis.Redis``.
        Devices are stored as JSON under `cache_key`, deleted by `clear_cache`.
        """
        store = cache if cache is not None else MemoryCache()

        def load() -> dict[str, dict[str, Any]]:
            cached = store.get(cache_key)
            if cached is not None:
                return json.loads(cached)
            devices = {name: dict(config) for name, config in loader().items()}
            store.set(cache_key, json.dumps(devices), ex=ttl)
            _LOGGER.debug("Cached %s devices under %s for %ss", len(devices), cache_key, ttl)
            return devices

        def default_name() -> str | None:
            if default is not None:
                return default
            return next(iter(load()), None)

        return cls(
            names=lambda: list(load()),
            config=lambda name: load().get(name),
            default=default_name,
            has=lambda name: name in load(),
            clear_cache=lambda: store.delete(cache_key),
            **kwargs,
        )
