from .base import DeviceProvider  # noqa: F401
from .callback import CallbackDeviceProvider, MemoryCache  # noqa: F401
from .static import StaticDeviceProvider  # noqa: F401
from .tabular import TabularDeviceProvider  # noqa: F401
