"""Authentication of ISAPI requests."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Generator
import logging

import httpx

_LOGGER = logging.getLogger(__name__)


class Authenticator(ABC):
    """Builds httpx auth for device credentials."""

    @abstractmethod
    def build_auth(self, username: str, password: str) -> httpx.Auth:
        """Return auth handler attached to every request of a device."""


class BasicAuthenticator(Authenticator):
    def build_auth(self, username: str, password: str) -> httpx.Auth:
        return httpx.BasicAuth(username, password)


class DigestAuthenticator(Authenticator):
    def build_auth(self, username: str, password: str) -> httpx.Auth:
        return httpx.DigestAuth(username, password)


class DetectingAuthenticator(Authenticator):
    """Picks Basic or Digest from the device WWW-Authenticate challenge."""

    def build_auth(self, username: str, password: str) -> httpx.Auth:
        return ISAPIAuth(username, password)


class ISAPIAuth(httpx.Auth):
    """Auth flow resolving the scheme on the first 401 response.

    The detected scheme is kept for all subsequent requests of the device.
    """

    requires_request_body = True

    def __init__(self, username: str, password: str) -> None:
        """Initialize."""
        self._username = username
        self._password = password
        self._auth_method: httpx.Auth | None = None

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self._auth_method:
            yield from self._auth_method.auth_flow(request)
            return

        response = yield request
        if response.status_code != 401:
            return

        www_authenticate = response.headers.get("WWW-Authenticate", "")
        _LOGGER.debug("WWW-Authenticate header: %s", www_authenticate)
        if "Digest" in www_authenticate:
            self._auth_method = httpx.DigestAuth(self._username, self._password)
        elif "Basic" in www_authenticate:
            self._auth_method = httpx.BasicAuth(self._username, self._password)
        else:
            _LOGGER.error("Authentication method not detected, %s", response.status_code)
            if response.headers:
                _LOGGER.error("response.headers %s", response.headers)
            return

        yield from self._auth_method.auth_flow(request)
