"""HTTP event notification hosts.

Devices push events to the configured hosts. The httpHosts endpoints accept
XML only, so every update is sent with `put_xml`.
"""

from __future__ import annotations

from collections.abc import Iterable
import ipaddress
import logging
import re
from typing import Any
from urllib.parse import urlparse

from ..client import ISAPIClient
from ..exceptions import ISAPIError
from ..utils import deep_get, str_to_bool

Node = dict[str, Any]

_LOGGER = logging.getLogger(__name__)

ENDPOINT_HTTP_HOSTS = "Event/notification/httpHosts"
ENDPOINT_HTTP_HOST = "Event/notification/httpHosts/{}"
ENDPOINT_CAPABILITIES = "Event/notification/capabilities"

DOMAIN_PATTERN = re.compile(
    r"^(?:[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?\.)*[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?$"
)


def is_ip_address(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def build_http_host(
    host_id: int,
    address: str,
    port: int,
    url_path: str = "/",
    protocol: str = "HTTP",
    auth_method: str = "none",
    username: str | None = None,
    password: str | None = None,
    event_types: Iterable[str] = (),
) -> Node:
    """Build HttpHostNotification payload."""
    host: Node = {
        "id": host_id,
        "url": url_path,
        "protocolType": protocol.upper(),
        "parameterFormatType": "XML",
    }
    if is_ip_address(address):
        host["addressingFormatType"] = "ipaddress"
        host["ipAddress"] = address
    else:
        host["addressingFormatType"] = "hostname"
        host["hostName"] = address
    host["portNo"] = port
    host["httpAuthenticationMethod"] = auth_method
    host["enabled"] = True

    if auth_method != "none" and username and password:
        host["userName"] = username
        host["password"] = password

    if event_types := list(event_types):
        host["eventList"] = {"eventType": event_types}

    return {"HttpHostNotification": host}


class EventNotificationService:
    """Manage HTTP notification hosts of a device."""

    def __init__(self, client: ISAPIClient) -> None:
        """Initialize."""
        self.client = client

    def get_http_hosts(self) -> Node:
        return self.client.get(ENDPOINT_HTTP_HOSTS)

    def get_http_host(self, host_id: int = 1) -> Node:
        return self.client.get(ENDPOINT_HTTP_HOST.format(host_id))

    def get_alarm_server(self) -> Node | None:
        """Get first configured notification host."""
        hosts = deep_get(self.get_http_hosts(), "HttpHostNotificationList.HttpHostNotification", [])
        return hosts[0] if hosts else None

    def get_capabilities(self) -> Node:
        return self.client.get(ENDPOINT_CAPABILITIES)

    def configure_http_host(
        self,
        url: str,
        host_id: int = 1,
        protocol: str = "HTTP",
        port: int = 80,
        auth_method: str = "none",
        username: str | None = None,
        password: str | None = None,
        event_types: Iterable[str] = (),
    ) -> Node:
        """Send events to `url`, an empty `event_types` subscribes to all events."""
        address = urlparse(url)
        data = build_http_host(
            host_id,
            address.hostname or "",
            port,
            address.path or "/",
            protocol,
            auth_method,
            username,
            password,
            event_types,
        )
        return self.client.put_xml(ENDPOINT_HTTP_HOST.format(host_id), data)

    def configure_webhook(self, webhook_url: str, host_id: int = 1, event_types: Iterable[str] = ()) -> Node:
        """Configure host from a full webhook URL, protocol and port are taken from the URL."""
        address = urlparse(webhook_url)
        protocol = (address.scheme or "http").upper()
        port = address.port or (443 if protocol == "HTTPS" else 80)
        return self.configure_http_host(
            webhook_url,
            host_id=host_id,
            protocol=protocol,
            port=port,
            event_types=event_types,
        )

    def configure_listening_host(
        self,
        server_address: str,
        server_port: int,
        url_path: str = "/",
        protocol: str = "HTTP",
        host_id: int = 1,
        auth_method: str = "none",
        username: str | None = None,
        password: str | None = None,
        event_types: Iterable[str] = (),
    ) -> Node:
        """Configure listening service at http(s)://<server_address>:<server_port><url_path>."""
        if not is_ip_address(server_address) and not DOMAIN_PATTERN.match(server_address):
            raise ValueError(f"Invalid IP address or domain name: {server_address}")
        if not 1 <= server_port <= 65535:
            raise ValueError(f"Port must be between 1 and 65535, got: {server_port}")
        if not url_path.startswith("/"):
            url_path = f"/{url_path}"

        data = build_http_host(
            host_id,
            server_address,
            server_port,
            url_path,
            protocol,
            auth_method,
            username,
            password,
            event_types,
        )
        return self.client.put_xml(ENDPOINT_HTTP_HOST.format(host_id), data)

    def set_http_host_enabled(self, is_enabled: bool, host_id: int = 1) -> Node:
        """Enable or disable notification host, keeps the rest of its configuration."""
        config = self.get_http_host(host_id)
        host = config.get("HttpHostNotification") if isinstance(config, dict) else None
        if not host:
            raise ISAPIError(f"HTTP host {host_id} configuration not found", self.client.name)

        if str_to_bool(host.get("enabled")) == is_enabled:
            return config
        host["enabled"] = is_enabled
        return self.client.put_xml(ENDPOINT_HTTP_HOST.format(host_id), {"HttpHostNotification": host})

    def enable_http_host(self, host_id: int = 1) -> Node:
        return self.set_http_host_enabled(True, host_id)

    def disable_http_host(self, host_id: int = 1) -> Node:
        return self.set_http_host_enabled(False, host_id)

    def remove_http_host(self, host_id: int = 1) -> Node:
        return self.client.delete(ENDPOINT_HTTP_HOST.format(host_id))

    def test_http_host(self, host_id: int = 1) -> Node:
        """Ask the device to send a test event to the host."""
        return self.client.post(f"{ENDPOINT_HTTP_HOST.format(host_id)}/test")
