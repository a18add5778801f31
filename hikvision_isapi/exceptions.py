"""Hikvision ISAPI errors."""

from __future__ import annotations

import logging

_LOGGER = logging.getLogger(__name__)


class ISAPIError(Exception):
    """Base error of the ISAPI client."""

    def __init__(self, message: str, device: str | None = None) -> None:
        """Initialize exception."""
        super().__init__(message)
        self.message = message
        self.device = device


class ISAPIConfigError(ISAPIError):
    """Device configuration cannot be used to build a client."""


class ISAPIInvalidDeviceConfigError(ISAPIConfigError):
    """Device record is present but malformed or incomplete."""


class ISAPIDeviceNotFoundError(ISAPIError):
    """Provider does not know the device."""

    def __init__(self, device: str) -> None:
        """Initialize exception."""
        super().__init__(f"Device '{device}' not found in configuration", device)


class ISAPINoDeviceAvailableError(ISAPIError):
    """No device name given and the provider has no default."""

    def __init__(self) -> None:
        """Initialize exception."""
        super().__init__(
            "No device name provided and no default device available. "
            "Please ensure at least one device is configured."
        )


class ISAPIProviderUnavailableError(ISAPIError):
    """Device provider failed to reach its source."""


class ISAPIRequestError(ISAPIError):
    """Device rejected the request or could not be reached."""

    def __init__(
        self,
        message: str,
        *,
        device: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        """Initialize exception."""
        if body:
            message = f"{message}\nResponse: {body}"
        super().__init__(message, device)
        self.url = url
        self.status_code = status_code
        self.body = body


class ISAPIConnectionError(ISAPIRequestError):
    """Connection refused, timeout or other transport failure."""


class ISAPIUnauthorizedError(ISAPIRequestError):
    """HTTP Error 401."""

    def __init__(self, url: str, device: str | None = None, body: str | None = None) -> None:
        """Initialize exception."""
        super().__init__(
            f"Unauthorized request {url}, check username and password.",
            device=device,
            url=url,
            status_code=401,
            body=body,
        )


class ISAPIForbiddenError(ISAPIRequestError):
    """HTTP Error 403."""

    def __init__(self, url: str, device: str | None = None, body: str | None = None) -> None:
        """Initialize exception."""
        super().__init__(
            f"Forbidden request {url}, check user permissions.",
            device=device,
            url=url,
            status_code=403,
            body=body,
        )
        _LOGGER.warning(self.message)
