"""Hikvision ISAPI client."""

from __future__ import annotations

from collections.abc import Mapping
from http import HTTPStatus
import logging
from typing import Any
from urllib.parse import parse_qsl, urlencode

import httpx

from .auth import Authenticator, DetectingAuthenticator
from .codec import decode_response, encode_body
from .const import CONTENT_TYPES, DELETE, GET, ISAPI_PREFIX, POST, PUT, Format
from .exceptions import (
    ISAPIConnectionError,
    ISAPIForbiddenError,
    ISAPIInvalidDeviceConfigError,
    ISAPIRequestError,
    ISAPIUnauthorizedError,
)
from .models import DeviceContext
from .utils import bool_to_str

Params = Mapping[str, Any] | None

_LOGGER = logging.getLogger(__name__)


class ISAPIClient:
    """ISAPI client bound to a single device.

    Every request is encoded as JSON or XML. The format is chosen per call and
    defaults to the format configured for the device; it is never remembered
    between calls.
    """

    def __init__(
        self,
        context: DeviceContext,
        authenticator: Authenticator | None = None,
        session: httpx.Client | None = None,
    ) -> None:
        """Initialize."""
        device = context.device
        if not device.username:
            raise ISAPIInvalidDeviceConfigError("Username is required in device configuration", context.name)
        if not device.password:
            raise ISAPIInvalidDeviceConfigError("Password is required in device configuration", context.name)

        self.context = context
        self.isapi_prefix = ISAPI_PREFIX
        self._auth = (authenticator or DetectingAuthenticator()).build_auth(device.username, device.password)
        self._session = session or httpx.Client(timeout=device.timeout, verify=device.verify_ssl)

        logging_config = context.settings.logging
        self._log_enabled = logging_config.get("enabled", True)
        level = logging.getLevelName(str(logging_config.get("level", "debug")).upper())
        self._log_level = level if isinstance(level, int) else logging.DEBUG

    @property
    def name(self) -> str:
        return self.context.name

    @property
    def base_url(self) -> str:
        return self.context.base_url

    @property
    def default_format(self) -> Format:
        return self.context.default_format

    @property
    def is_closed(self) -> bool:
        return self._session.is_closed

    def get_isapi_url(self, path: str) -> str:
        """Build full URL, relative paths are placed under /ISAPI/."""
        if not path.startswith("/"):
            path = f"/{self.isapi_prefix}/{path}"
        return f"{self.base_url}{path}"

    def build_url(self, path: str, params: Params = None, fmt: Format | None = None) -> str:
        """Build request URL with query string.

        An explicit `fmt` replaces any `format` in the path or params, otherwise
        the default format is added unless one is already there.
        """
        path, _, existing_query = path.partition("?")
        query = dict(parse_qsl(existing_query))
        for key, value in (params or {}).items():
            if value is None:
                continue
            query[key] = bool_to_str(value) if isinstance(value, bool) else value
        if fmt:
            query["format"] = Format(fmt).value
        else:
            query.setdefault("format", self.default_format.value)
        return f"{self.get_isapi_url(path)}?{urlencode(query)}"

    def build_headers(self, fmt: Format, multipart: bool = False) -> dict[str, str]:
        """Accept and Content-Type headers matching the format."""
        content_type = CONTENT_TYPES[fmt]
        headers = {"Accept": content_type}
        if not multipart:
            # httpx sets multipart content type with its boundary
            headers["Content-Type"] = content_type
        return headers

    def _resolve_format(self, fmt: Format | str | None, path: str, params: Params) -> Format:
        """Explicit format, then `format` of params or path query, then the default."""
        if fmt:
            return Format(fmt)
        requested = dict(params or {}).get("format")
        if requested is None:
            requested = dict(parse_qsl(path.partition("?")[2])).get("format")
        if requested in (Format.JSON.value, Format.XML.value):
            return Format(requested)
        return self.default_format

    def _log(self, msg: str, *args: Any) -> None:
        if self._log_enabled:
            _LOGGER.log(self._log_level, msg, *args)

    def request(
        self,
        method: str,
        path: str,
        data: Any = None,
        params: Params = None,
        fmt: Format | str | None = None,
        files: Any = None,
        form: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send ISAPI request and return decoded response."""
        fmt = self._resolve_format(fmt, path, params)
        url = self.build_url(path, params, fmt)
        multipart = files is not None
        content = None if multipart else encode_body(data, fmt)

        try:
            response = self._session.request(
                method,
                url,
                content=content,
                data=form if multipart else None,
                files=files,
                headers=self.build_headers(fmt, multipart),
                auth=self._auth,
                timeout=self.context.device.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as ex:
            _LOGGER.info("--- [%s] %s\n%s", method, url, ex)
            body = ex.response.text
            if ex.response.status_code == HTTPStatus.UNAUTHORIZED:
                raise ISAPIUnauthorizedError(url, self.name, body) from ex
            if ex.response.status_code == HTTPStatus.FORBIDDEN:
                raise ISAPIForbiddenError(url, self.name, body) from ex
            raise ISAPIRequestError(
                f"HTTP request failed: {ex}",
                device=self.name,
                url=url,
                status_code=ex.response.status_code,
                body=body,
            ) from ex
        except httpx.HTTPError as ex:
            _LOGGER.info("--- [%s] %s\n%s", method, url, ex)
            raise ISAPIConnectionError(
                f"HTTP request failed: {ex!r}",
                device=self.name,
                url=url,
            ) from ex

        result = decode_response(response)
        self._log("--- [%s] %s", method, url)
        if content:
            self._log(">>> payload:\n%s", content)
        self._log("\n%s", result)
        return result

    def get(self, path: str, params: Params = None, fmt: Format | None = None) -> Any:
        return self.request(GET, path, params=params, fmt=fmt)

    def post(self, path: str, data: Any = None, params: Params = None, fmt: Format | None = None) -> Any:
        return self.request(POST, path, data, params, fmt)

    def put(self, path: str, data: Any = None, params: Params = None, fmt: Format | None = None) -> Any:
        return self.request(PUT, path, data, params, fmt)

    def put_xml(self, path: str, data: Any = None, params: Params = None) -> Any:
        """PUT request with XML forced in query string, headers and body.

        Used by endpoints rejecting JSON regardless of the device format,
        e.g. event notification hosts.
        """
        params = {**(params or {}), "format": Format.XML.value}
        return self.request(PUT, path, data, params, Format.XML)

    def delete(self, path: str, params: Params = None, fmt: Format | None = None) -> Any:
        return self.request(DELETE, path, params=params, fmt=fmt)

    def post_multipart(
        self,
        path: str,
        files: Any,
        form: Mapping[str, Any] | None = None,
        params: Params = None,
        fmt: Format | None = None,
    ) -> Any:
        """POST multipart/form-data, `files` and `form` follow httpx conventions."""
        return self.request(POST, path, params=params, fmt=fmt, files=files, form=form)

    def put_multipart(
        self,
        path: str,
        files: Any,
        form: Mapping[str, Any] | None = None,
        params: Params = None,
        fmt: Format | None = None,
    ) -> Any:
        return self.request(PUT, path, params=params, fmt=fmt, files=files, form=form)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> ISAPIClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
