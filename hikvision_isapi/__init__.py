"""Hikvision ISAPI device access."""

from .auth import (  # noqa: F401
    Authenticator,
    BasicAuthenticator,
    DetectingAuthenticator,
    DigestAuthenticator,
)
from .client import ISAPIClient  # noqa: F401
from .const import Format  # noqa: F401
from .exceptions import (  # noqa: F401
    ISAPIConfigError,
    ISAPIConnectionError,
    ISAPIDeviceNotFoundError,
    ISAPIError,
    ISAPIForbiddenError,
    ISAPIInvalidDeviceConfigError,
    ISAPINoDeviceAvailableError,
    ISAPIProviderUnavailableError,
    ISAPIRequestError,
    ISAPIUnauthorizedError,
)
from .manager import DeviceManager  # noqa: F401
from .models import DeviceConfig, DeviceContext, GlobalConfig, Person, UserType  # noqa: F401
from .providers import (  # noqa: F401
    CallbackDeviceProvider,
    DeviceProvider,
    StaticDeviceProvider,
    TabularDeviceProvider,
)
