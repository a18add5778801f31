"""Device provider backed by a database table."""

from __future__ import annotations

from collections.abc import Mapping
import logging
import threading
import time
from typing import Any

from sqlalchemy import column, select, table
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..const import (
    CONF_PORT,
    CONF_TIMEOUT,
    CONF_VERIFY_SSL,
    DEFAULT_CACHE_TTL,
    DEFAULT_COLUMNS,
    DEFAULT_NAME_COLUMN,
    DEFAULT_TABLE,
)
from ..exceptions import ISAPIProviderUnavailableError
from ..models import DeviceConfig, GlobalConfig
from ..utils import str_to_bool
from .base import DeviceProvider

_LOGGER = logging.getLogger(__name__)

INT_FIELDS = (CONF_PORT, CONF_TIMEOUT)
BOOL_FIELDS = (CONF_VERIFY_SSL,)


def _coerce(key: str, value: Any) -> Any:
    """Cast column value to the type of the config field."""
    if value is None:
        return None
    try:
        if key in INT_FIELDS:
            return int(value)
    except (TypeError, ValueError):
        # left as is, reported when the device config is validated
        return value
    if key in BOOL_FIELDS:
        return str_to_bool(value) if isinstance(value, str) else bool(value)
    return value


class TabularDeviceProvider(DeviceProvider):
    """Devices stored one per row in a database table.

    Rows are loaded all at once and kept for `cache_ttl` seconds. A failed load
    raises ISAPIProviderUnavailableError; stale rows are never served.

    Example::

        provider = TabularDeviceProvider(
            engine,
            table_name="terminals",
            columns={"host": "ip_address", "username": "login", "password": "secret"},
            where={"status": "active"},
        )
    """

    def __init__(
        self,
        engine: Engine,
        table_name: str = DEFAULT_TABLE,
        name_column: str = DEFAULT_NAME_COLUMN,
        columns: Mapping[str, str] | None = None,
        default_device: str | None = None,
        where: Mapping[str, Any] | None = None,
        cache: bool = True,
        cache_ttl: int = DEFAULT_CACHE_TTL,
        global_config: Mapping[str, Any] | GlobalConfig | None = None,
    ) -> None:
        """Initialize."""
        self._engine = engine
        self._table_name = table_name
        self._name_column = name_column
        self._columns = dict(columns or DEFAULT_COLUMNS)
        self._where = dict(where or {})
        self._table = table(
            table_name,
            *[column(name) for name in dict.fromkeys([name_column, *self._columns.values(), *self._where])],
        )
        self._default = default_device
        self._cache_enabled = cache
        self._cache_ttl = cache_ttl
        self._global_config = GlobalConfig.from_dict(global_config)

        self._lock = threading.Lock()
        self._devices: dict[str, dict[str, Any]] = {}
        self._cache_time: float | None = None

    @classmethod
    def from_model(cls, engine: Engine, model: Any, **kwargs: Any) -> TabularDeviceProvider:
        """Create provider for the table of a SQLAlchemy declarative model."""
        return cls(engine, table_name=model.__table__.name, **kwargs)

    def _is_cache_valid(self) -> bool:
        if not self._cache_enabled or not self._devices or self._cache_time is None:
            return False
        return time.monotonic() - self._cache_time < self._cache_ttl

    def _load_devices(self) -> dict[str, dict[str, Any]]:
        """Get device records, reloading the whole table when the cache expired."""
        with self._lock:
            if self._is_cache_valid():
                return self._devices

            query = select(self._table)
            for key, value in self._where.items():
                query = query.where(self._table.c[key] == value)

            try:
                with self._engine.connect() as connection:
                    rows = connection.execute(query).mappings().all()
            except SQLAlchemyError as ex:
                raise ISAPIProviderUnavailableError(
                    f"Cannot load devices from table '{self._table_name}': {ex}"
                ) from ex

            devices = {}
            for row in rows:
                devices[str(row[self._name_column])] = {
                    key: _coerce(key, row[column_name]) for key, column_name in self._columns.items()
                }
            self._devices = devices
            self._cache_time = time.monotonic()
            _LOGGER.debug("Loaded %s devices from table %s", len(devices), self._table_name)
            return devices

    def list_names(self) -> list[str]:
        return list(self._load_devices())

    def config(self, name: str) -> DeviceConfig | None:
        device = self._load_devices().get(name)
        if device is None:
            return None
        return DeviceConfig.from_dict(device, name)

    def default_name(self) -> str | None:
        if self._default:
            return self._default
        return next(iter(self._load_devices()), None)

    def has(self, name: str) -> bool:
        return name in self._load_devices()

    def global_config(self) -> GlobalConfig:
        return self._global_config

    def clear_cache(self) -> None:
        """Force reload on next access, e.g. after terminals were updated."""
        with self._lock:
            self._devices = {}
            self._cache_time = None
