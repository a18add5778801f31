from enum import StrEnum
from typing import Final

GET = "GET"
PUT = "PUT"
POST = "POST"
DELETE = "DELETE"

ISAPI_PREFIX: Final = "ISAPI"


class Format(StrEnum):
    """Wire encoding of a request or response body."""

    JSON = "json"
    XML = "xml"


CONTENT_TYPE_JSON: Final = "application/json"
CONTENT_TYPE_XML: Final = "application/xml"
CONTENT_TYPES = {
    Format.JSON: CONTENT_TYPE_JSON,
    Format.XML: CONTENT_TYPE_XML,
}

XML_NAMESPACE: Final = "http://www.isapi.org/ver20/XMLSchema"
XML_VERSION: Final = "2.0"
# Root element used when an XML payload does not have exactly one top-level key
XML_FALLBACK_ROOT: Final = "UserInfo"

RAW_KEY: Final = "raw"

PROTOCOL_HTTP: Final = "http"
PROTOCOL_HTTPS: Final = "https"
PROTOCOLS = [PROTOCOL_HTTP, PROTOCOL_HTTPS]

CONF_HOST: Final = "host"
CONF_IP: Final = "ip"
CONF_PORT: Final = "port"
CONF_USERNAME: Final = "username"
CONF_PASSWORD: Final = "password"
CONF_PROTOCOL: Final = "protocol"
CONF_TIMEOUT: Final = "timeout"
CONF_VERIFY_SSL: Final = "verify_ssl"

CONF_DEVICES: Final = "devices"
CONF_DEFAULT: Final = "default"
CONF_FORMAT: Final = "format"
CONF_LOGGING: Final = "logging"

DEFAULT_PORT = 80
DEFAULT_PROTOCOL = PROTOCOL_HTTP
DEFAULT_TIMEOUT = 30
DEFAULT_VERIFY_SSL = False
DEFAULT_LOGGING = {
    "enabled": True,
    "level": "debug",
}

DEFAULT_CACHE_TTL = 3600
DEFAULT_TABLE = "terminals"
DEFAULT_NAME_COLUMN = "name"
DEFAULT_COLUMNS = {
    CONF_HOST: "ip",
    CONF_PORT: "port",
    CONF_USERNAME: "username",
    CONF_PASSWORD: "password",
    CONF_PROTOCOL: "protocol",
    CONF_TIMEOUT: "timeout",
    CONF_VERIFY_SSL: "verify_ssl",
}
