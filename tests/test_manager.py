"""Tests for resolving devices by name."""

from concurrent.futures import ThreadPoolExecutor

import pytest
import respx

from hikvision_isapi import (
    BasicAuthenticator,
    CallbackDeviceProvider,
    DeviceManager,
    ISAPIDeviceNotFoundError,
    ISAPIInvalidDeviceConfigError,
    ISAPINoDeviceAvailableError,
    StaticDeviceProvider,
    TabularDeviceProvider,
)
from tests.conftest import TEST_CONFIG, TEST_ENTRANCE_IP, TEST_HOST, TEST_HOST_IP, count_queries, mock_endpoint


def test_resolve(manager):
    primary = manager.resolve("primary")
    entrance = manager.resolve("entrance")

    assert primary.base_url == TEST_HOST
    assert entrance.base_url == f"https://{TEST_ENTRANCE_IP}:8080"
    assert entrance.context.device.verify_ssl is True
    assert manager.resolve("primary") is primary
    assert manager.resolve() is primary
    assert manager.default() is primary


def test_resolve_default_from_mapping():
    manager = DeviceManager({"devices": {"entrance": TEST_CONFIG["devices"]["entrance"]}})

    assert manager.resolve().name == "entrance"
    assert manager.list_devices() == ["entrance"]


def test_resolve_unknown_device(manager):
    with pytest.raises(ISAPIDeviceNotFoundError) as ex:
        manager.resolve("garage")

    assert ex.value.device == "garage"
    assert ex.value.message == "Device 'garage' not found in configuration"


def test_no_device_available():
    manager = DeviceManager()

    with pytest.raises(ISAPINoDeviceAvailableError):
        manager.resolve()
    assert manager.list_devices() == []


def test_invalid_device_config():
    manager = DeviceManager({"devices": {"broken": {"ip": "1.0.0.1", "port": 0, "username": "a", "password": "b"}}})

    with pytest.raises(ISAPIInvalidDeviceConfigError):
        manager.resolve("broken")
    # failed builds are not cached
    with pytest.raises(ISAPIInvalidDeviceConfigError):
        manager.resolve("broken")


def test_switch_device(manager):
    assert manager.switch_device("entrance").name == "entrance"

    with pytest.raises(ISAPIDeviceNotFoundError):
        manager.switch_device("garage")


def test_has_device(manager):
    assert manager.has_device("primary")
    assert not manager.has_device("garage")
    assert manager.list_devices() == ["primary", "entrance"]


def test_set_provider(manager):
    primary = manager.resolve("primary")
    provider = CallbackDeviceProvider.from_mapping(
        {"primary": {"ip": "10.9.9.9", "username": "admin", "password": "pw"}}
    )

    manager.set_provider(provider)

    assert manager.provider is provider
    client = manager.resolve("primary")
    assert client is not primary
    assert client.base_url == "http://10.9.9.9:80"
    assert not manager.has_device("entrance")


def test_register_device(manager):
    client = manager.register_device("temporary", {"ip": "10.2.0.1", "username": "admin", "password": "pw"})

    assert manager.resolve("temporary") is client
    assert not manager.has_device("temporary")

    manager.clear_clients()
    with pytest.raises(ISAPIDeviceNotFoundError):
        manager.resolve("temporary")


def test_reload(terminals_engine):
    manager = DeviceManager(TabularDeviceProvider(terminals_engine), BasicAuthenticator())
    queries = count_queries(terminals_engine)

    lobby = manager.resolve("lobby")
    manager.resolve("garage")
    assert manager.resolve("lobby") is lobby
    assert len(queries) == 1

    manager.reload()
    assert manager.resolve("lobby") is not lobby
    assert len(queries) == 2
    manager.close()


def test_resolve_concurrently(manager):
    with ThreadPoolExecutor(max_workers=8) as executor:
        clients = list(executor.map(lambda _: manager.resolve("entrance"), range(32)))

    assert all(client is clients[0] for client in clients)


def test_global_config_applied():
    config = {**TEST_CONFIG, "format": "xml"}
    manager = DeviceManager(StaticDeviceProvider(config), BasicAuthenticator())

    assert manager.resolve("entrance").default_format == "xml"


@respx.mock
def test_devices_are_independent(manager):
    """Requests go to the device that was resolved."""

    primary_route = mock_endpoint("System/deviceInfo", json={"DeviceInfo": {"deviceName": "primary"}})
    entrance_route = mock_endpoint(
        "System/deviceInfo",
        json={"DeviceInfo": {"deviceName": "entrance"}},
        host=TEST_ENTRANCE_IP,
    )

    assert manager.resolve("entrance").get("System/deviceInfo")["DeviceInfo"]["deviceName"] == "entrance"
    assert manager.resolve().get("System/deviceInfo")["DeviceInfo"]["deviceName"] == "primary"

    assert primary_route.calls.last.request.url.host == TEST_HOST_IP
    entrance_request = entrance_route.calls.last.request
    assert entrance_request.url.scheme == "https"
    assert entrance_request.url.port == 8080


def test_reload_query_provider():
    rows = [{"name": "door", "ip": "10.1.0.1", "password": "pw"}]
    manager = DeviceManager(CallbackDeviceProvider.from_query(lambda: list(rows)), BasicAuthenticator())
    assert manager.resolve("door").base_url == "http://10.1.0.1:80"

    rows[0] = {"name": "door", "ip": "10.9.9.9", "password": "pw"}
    rows.append({"name": "gate", "ip": "10.1.0.2", "password": "pw"})
    assert not manager.has_device("gate")

    manager.reload()
    assert manager.resolve("door").base_url == "http://10.9.9.9:80"
    assert manager.list_devices() == ["door", "gate"]
    manager.close()


def test_reload_cached_provider():
    devices = {"door": {"ip": "10.1.0.1", "username": "admin", "password": "pw"}}
    manager = DeviceManager(
        CallbackDeviceProvider.from_cache(lambda: devices, ttl=300),
        BasicAuthenticator(),
    )
    assert manager.resolve("door").base_url == "http://10.1.0.1:80"

    devices["door"] = {"ip": "10.9.9.9", "username": "admin", "password": "pw"}
    manager.clear_clients()
    assert manager.resolve("door").base_url == "http://10.1.0.1:80"

    manager.reload()
    assert manager.resolve("door").base_url == "http://10.9.9.9:80"
    manager.close()


def test_register_device_closes_replaced_client(manager):
    first = manager.register_device("temporary", {"ip": "10.2.0.1", "username": "admin", "password": "pw"})
    second = manager.register_device("temporary", {"ip": "10.2.0.2", "username": "admin", "password": "pw"})

    assert first.is_closed
    assert not second.is_closed
    assert manager.resolve("temporary") is second


def test_close(manager):
    primary = manager.resolve("primary")

    manager.close()

    assert primary.is_closed
    assert manager.resolve("primary") is not primary


def test_missing_password_is_invalid_device_config():
    manager = DeviceManager({"devices": {"door": {"ip": "10.1.0.1", "username": "admin"}}})

    with pytest.raises(ISAPIInvalidDeviceConfigError) as ex:
        manager.resolve("door")
    assert ex.value.device == "door"
