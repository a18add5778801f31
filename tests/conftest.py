"""Fixtures for testing."""

import os

import pytest
import respx
from sqlalchemy import create_engine, event, text
from sqlalchemy.pool import StaticPool

from hikvision_isapi import BasicAuthenticator, DeviceManager, ISAPIClient, StaticDeviceProvider
from hikvision_isapi.models import DeviceConfig, DeviceContext, GlobalConfig

TEST_HOST_IP = "1.0.0.255"
TEST_HOST = f"http://{TEST_HOST_IP}:80"
TEST_ENTRANCE_IP = "1.0.0.11"

TEST_DEVICE = {
    "ip": TEST_HOST_IP,
    "port": 80,
    "username": "u1",
    "password": "***",
}
TEST_ENTRANCE = {
    "ip": TEST_ENTRANCE_IP,
    "port": 8080,
    "username": "admin",
    "password": "secret",
    "protocol": "https",
    "verify_ssl": True,
}

TEST_CONFIG = {
    "default": "primary",
    "format": "json",
    "logging": {"enabled": True, "level": "debug"},
    "devices": {
        "primary": TEST_DEVICE,
        "entrance": TEST_ENTRANCE,
    },
}

TEST_TERMINALS = [
    {
        "name": "lobby",
        "ip": "10.0.0.1",
        "port": 80,
        "username": "admin",
        "password": "pass1",
        "protocol": "http",
        "timeout": 10,
        "verify_ssl": 0,
        "status": "active",
    },
    {
        "name": "garage",
        "ip": "10.0.0.2",
        "port": "8000",
        "username": "admin",
        "password": "pass2",
        "protocol": "https",
        "timeout": None,
        "verify_ssl": 1,
        "status": "active",
    },
    {
        "name": "warehouse",
        "ip": "10.0.0.3",
        "port": 80,
        "username": "admin",
        "password": "pass3",
        "protocol": "http",
        "timeout": 30,
        "verify_ssl": 0,
        "status": "retired",
    },
]

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")
XML_HEADERS = {"Content-Type": 'application/xml; charset="UTF-8"'}


def load_fixture(path, file):
    with open(os.path.join(FIXTURES_DIR, path, f"{file}.xml"), "r") as f:
        return f.read()


def mock_endpoint(endpoint, file=None, status_code=200, method="GET", host=TEST_HOST_IP, json=None):
    """Mock ISAPI endpoint."""

    route = respx.route(method=method, host=host, path=f"/ISAPI/{endpoint}")
    if json is not None:
        return route.respond(status_code=status_code, json=json)
    if not file:
        return route.respond(status_code=status_code)
    path = f"ISAPI/{endpoint.replace('/', '.')}"
    return route.respond(status_code=status_code, text=load_fixture(path, file), headers=XML_HEADERS)


def count_queries(engine, table_name="terminals"):
    """Collect SELECT statements reading the table."""

    statements = []

    @event.listens_for(engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT") and f"FROM {table_name}" in statement:
            statements.append(statement)

    return statements


@pytest.fixture
def device_context() -> DeviceContext:
    return DeviceContext("primary", DeviceConfig.from_dict(TEST_DEVICE, "primary"), GlobalConfig())


@pytest.fixture
def mock_isapi(device_context):
    """ISAPI client of the primary test device."""

    client = ISAPIClient(device_context, BasicAuthenticator())
    yield client
    client.close()


@pytest.fixture
def manager():
    """Device manager with primary and entrance devices."""

    manager = DeviceManager(StaticDeviceProvider(TEST_CONFIG), BasicAuthenticator())
    yield manager
    manager.close()


@pytest.fixture
def terminals_engine():
    """In-memory database with the terminals table."""

    engine = create_engine("sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
    with engine.begin() as connection:
        connection.execute(
            text(
                "CREATE TABLE terminals ("
                "name VARCHAR PRIMARY KEY, ip VARCHAR, port VARCHAR, username VARCHAR, password VARCHAR, "
                "protocol VARCHAR, timeout INTEGER, verify_ssl INTEGER, status VARCHAR)"
            )
        )
        connection.execute(
            text(
                "INSERT INTO terminals (name, ip, port, username, password, protocol, timeout, verify_ssl, status) "
                "VALUES (:name, :ip, :port, :username, :password, :protocol, :timeout, :verify_ssl, :status)"
            ),
            TEST_TERMINALS,
        )
    yield engine
    engine.dispose()


@pytest.fixture
def config_file(tmp_path):
    """YAML configuration document."""

    path = tmp_path / "hikvision.yaml"
    path.write_text(
        "default: entrance\n"
        "format: xml\n"
        "logging:\n"
        "  enabled: false\n"
        "devices:\n"
        "  primary:\n"
        f"    ip: {TEST_HOST_IP}\n"
        "    username: u1\n"
        '    password: "***"\n'
        "  entrance:\n"
        f"    host: {TEST_ENTRANCE_IP}\n"
        "    port: 8080\n"
        "    username: admin\n"
        "    password: secret\n"
        "    protocol: HTTPS\n",
        encoding="utf-8",
    )
    return path
